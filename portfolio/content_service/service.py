from typing import Any, Dict, List, Optional, Type, TypeVar
import logging
import uuid
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel

from portfolio.storage.dynamodb import DynamoDBService
from portfolio.content_service.models import (
    Project,
    ProjectCreate,
    ProjectUpdate,
    SocialLink,
    SocialLinkCreate,
    SocialLinkUpdate,
    Tool,
    ToolCreate,
    ToolKind,
)
from portfolio.exceptions import ContentNotFoundException, DynamoDBException

log = logging.getLogger(__name__)

PROJECTS = "projects"
SOCIAL_LINKS = "socialLinks"

RecordT = TypeVar("RecordT", bound=BaseModel)

def new_item_id() -> str:
    """Generates a new unique content item ID."""
    return str(uuid.uuid4())

def _to_record(model: Type[RecordT], item: Dict[str, Any]) -> RecordT:
    attrs = {k: v for k, v in item.items() if k not in ("collection", "item_id")}
    return model(id=item["item_id"], **attrs)

# ------------------------------
# Generic collection helpers
# ------------------------------

def _list(db: DynamoDBService, collection: str, model: Type[RecordT]) -> List[RecordT]:
    try:
        items = db.query_collection(collection)
    except (BotoCoreError, ClientError) as e:
        log.error(f"DynamoDB query of {collection} failed: {e}")
        raise DynamoDBException(f"Failed to fetch {collection}: {e}")
    return [_to_record(model, item) for item in items]

def _create(db: DynamoDBService, collection: str, data: BaseModel, model: Type[RecordT]) -> RecordT:
    item_id = new_item_id()
    attrs = data.model_dump(exclude_none=True)
    try:
        db.put_item(collection, item_id, attrs)
    except (BotoCoreError, ClientError) as e:
        log.error(f"DynamoDB put_item in {collection} failed: {e}")
        raise DynamoDBException(f"Failed to save item: {e}")
    log.info("Created %s/%s", collection, item_id)
    return model(id=item_id, **attrs)

def _get(db: DynamoDBService, collection: str, item_id: str) -> Dict[str, Any]:
    try:
        item = db.get_item(collection, item_id)
    except (BotoCoreError, ClientError) as e:
        log.error(f"DynamoDB get_item in {collection} failed: {e}")
        raise DynamoDBException(f"Failed to get item: {e}")
    if not item:
        raise ContentNotFoundException(collection, item_id)
    return item

def _update(
    db: DynamoDBService,
    collection: str,
    item_id: str,
    data: BaseModel,
    model: Type[RecordT],
) -> RecordT:
    attrs = data.model_dump(exclude_unset=True, exclude_none=True)
    if not attrs:
        return _to_record(model, _get(db, collection, item_id))
    try:
        item = db.update_item(collection, item_id, attrs)
    except ClientError as e:
        if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
            raise ContentNotFoundException(collection, item_id)
        log.error(f"DynamoDB update_item in {collection} failed: {e}")
        raise DynamoDBException(f"Failed to update item: {e}")
    except BotoCoreError as e:
        log.error(f"DynamoDB update_item in {collection} failed: {e}")
        raise DynamoDBException(f"Failed to update item: {e}")
    log.info("Updated %s/%s", collection, item_id)
    return _to_record(model, item)

def _delete(db: DynamoDBService, collection: str, item_id: str) -> None:
    _get(db, collection, item_id)
    try:
        db.delete_item(collection, item_id)
    except (BotoCoreError, ClientError) as e:
        log.error(f"DynamoDB delete_item in {collection} failed: {e}")
        raise DynamoDBException(f"Failed to delete item: {e}")
    log.info("Deleted %s/%s", collection, item_id)

# ------------------------------
# Projects
# ------------------------------

def list_projects(db: DynamoDBService) -> List[Project]:
    return _list(db, PROJECTS, Project)

def create_project(db: DynamoDBService, project: ProjectCreate) -> Project:
    return _create(db, PROJECTS, project, Project)

def update_project(db: DynamoDBService, project_id: str, changes: ProjectUpdate) -> Project:
    return _update(db, PROJECTS, project_id, changes, Project)

def delete_project(db: DynamoDBService, project_id: str) -> None:
    _delete(db, PROJECTS, project_id)

# ------------------------------
# Social links
# ------------------------------

def list_social_links(db: DynamoDBService) -> List[SocialLink]:
    return _list(db, SOCIAL_LINKS, SocialLink)

def create_social_link(db: DynamoDBService, link: SocialLinkCreate) -> SocialLink:
    return _create(db, SOCIAL_LINKS, link, SocialLink)

def update_social_link(db: DynamoDBService, link_id: str, changes: SocialLinkUpdate) -> SocialLink:
    return _update(db, SOCIAL_LINKS, link_id, changes, SocialLink)

def delete_social_link(db: DynamoDBService, link_id: str) -> None:
    _delete(db, SOCIAL_LINKS, link_id)

# ------------------------------
# Tools
# ------------------------------

def list_tools(db: DynamoDBService, kind: ToolKind) -> List[Tool]:
    return _list(db, kind.collection, Tool)

def list_tool_names(db: DynamoDBService, kind: ToolKind) -> List[str]:
    """Names only, as shown on the public pages."""
    return [tool.name for tool in list_tools(db, kind)]

def add_tool(db: DynamoDBService, kind: ToolKind, name: str) -> Tool:
    return _create(db, kind.collection, ToolCreate(name=name), Tool)

def find_tool_id(db: DynamoDBService, kind: ToolKind, name: str) -> Optional[str]:
    """Id of the first tool with this name, or None."""
    return next((tool.id for tool in list_tools(db, kind) if tool.name == name), None)

def delete_tool(db: DynamoDBService, kind: ToolKind, tool_id: str) -> None:
    _delete(db, kind.collection, tool_id)

def delete_tool_by_name(db: DynamoDBService, kind: ToolKind, name: str) -> None:
    tool_id = find_tool_id(db, kind, name)
    if tool_id is None:
        raise ContentNotFoundException(kind.collection, name)
    delete_tool(db, kind, tool_id)
