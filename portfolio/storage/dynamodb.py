import boto3
from boto3.dynamodb.conditions import Key
from typing import Optional, Dict, Any, List
from botocore.exceptions import ClientError
from portfolio.settings import settings
import logging

log = logging.getLogger(__name__)

# -------------------------
# DynamoDB Service
# -------------------------
class DynamoDBService:
    """Content records, one table keyed by (collection, item_id)."""

    def __init__(self):
        session = boto3.session.Session(region_name=settings.aws_region)
        kwargs = {
            "aws_access_key_id": settings.aws_access_key_id,
            "aws_secret_access_key": settings.aws_secret_access_key,
        }
        if settings.aws_endpoint_url:
            kwargs["endpoint_url"] = settings.aws_endpoint_url

        self.resource = session.resource("dynamodb", **kwargs)
        self.table = self.resource.Table(settings.content_table)
        log.info("Initialized DynamoDB resource")

        # Ensure table exists at initialization
        self.ensure_table()

    # Refer here: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/dynamodb/client/create_table.html
    def ensure_table(self):
        try:
            self.table.load()
        except ClientError:
            self.table = self.resource.create_table(
                TableName=settings.content_table,
                KeySchema=[
                    {"AttributeName": "collection", "KeyType": "HASH"},
                    {"AttributeName": "item_id", "KeyType": "RANGE"},
                ],
                AttributeDefinitions=[
                    {"AttributeName": "collection", "AttributeType": "S"},
                    {"AttributeName": "item_id", "AttributeType": "S"},
                ],
                BillingMode="PAY_PER_REQUEST",
            )
            self.table.wait_until_exists()
            log.info("Created table %s", settings.content_table)

    def put_item(self, collection: str, item_id: str, attrs: Dict[str, Any]):
        self.table.put_item(Item={**attrs, "collection": collection, "item_id": item_id})
        log.debug("Inserted %s/%s", collection, item_id)

    def get_item(self, collection: str, item_id: str) -> Optional[Dict[str, Any]]:
        resp = self.table.get_item(Key={"collection": collection, "item_id": item_id})
        return resp.get("Item")

    def update_item(self, collection: str, item_id: str, attrs: Dict[str, Any]) -> Dict[str, Any]:
        """Sets the given attributes on an existing item and returns the full item."""
        names = {f"#f{i}": field for i, field in enumerate(attrs)}
        values = {f":v{i}": value for i, value in enumerate(attrs.values())}
        expression = "SET " + ", ".join(f"#f{i} = :v{i}" for i in range(len(attrs)))
        resp = self.table.update_item(
            Key={"collection": collection, "item_id": item_id},
            UpdateExpression=expression,
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=values,
            ConditionExpression="attribute_exists(item_id)",
            ReturnValues="ALL_NEW",
        )
        log.debug("Updated %s/%s", collection, item_id)
        return resp["Attributes"]

    def delete_item(self, collection: str, item_id: str):
        self.table.delete_item(Key={"collection": collection, "item_id": item_id})
        log.debug("Deleted %s/%s", collection, item_id)

    def query_collection(self, collection: str) -> List[Dict[str, Any]]:
        items = []
        query_kwargs = {"KeyConditionExpression": Key("collection").eq(collection)}
        while True:
            resp = self.table.query(**query_kwargs)
            items.extend(resp.get("Items", []))
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                return items
            query_kwargs["ExclusiveStartKey"] = last_key

    def close(self):
        log.info("Closed DynamoDB resource")
