import base64
import hashlib
import json
import os

import httpx
import pytest
from moto import mock_aws
from fastapi.testclient import TestClient

# Set test environment variables BEFORE importing app modules
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ["AWS_REGION"] = "us-east-1"
os.environ["CONTENT_TABLE"] = "PortfolioContent"
# Clear the AWS_ENDPOINT_URL so moto mocks are used instead of localstack
os.environ.pop("AWS_ENDPOINT_URL", None)
os.environ.pop("ADMIN_TOKEN", None)
os.environ.pop("GH_TOKEN", None)
os.environ.pop("GH_REPO", None)

from portfolio.main import app
from portfolio.settings import Settings
from portfolio.storage.dynamodb import DynamoDBService
from portfolio.storage.github import GitHubConfig, GitHubContentsClient
from portfolio.dependencies.dependencies import get_dynamodb_service, get_image_store

OWNER = "octo"
REPO = "portfolio-site"
IMAGES_PATH = "public/images/projects"


class FakeGitHubRepo:
    """In-memory stand-in for the GitHub contents API of one repository."""

    def __init__(self):
        self.files = {}  # path -> (content, sha)
        self.requests = []
        self.fail_listing_with = None
        self.before_write = None  # runs before a PUT or DELETE; may return a response to send instead
        self.commits = 0

    def _entry(self, path):
        content, sha = self.files[path]
        name = path.rsplit("/", 1)[-1]
        api = f"https://api.github.com/repos/{OWNER}/{REPO}/contents/{path}"
        return {
            "name": name,
            "path": path,
            "sha": sha,
            "size": len(content),
            "url": api,
            "html_url": f"https://github.com/{OWNER}/{REPO}/blob/main/{path}",
            "git_url": f"https://api.github.com/repos/{OWNER}/{REPO}/git/blobs/{sha}",
            "download_url": f"https://raw.githubusercontent.com/{OWNER}/{REPO}/main/{path}",
            "type": "file",
        }

    def add(self, name, content):
        path = f"{IMAGES_PATH}/{name}"
        self.files[path] = (content, self._sha(content))
        return self.files[path][1]

    def _sha(self, content):
        self.commits += 1
        return hashlib.sha1(b"%d:" % self.commits + content).hexdigest()

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        prefix = f"/repos/{OWNER}/{REPO}/contents/"
        if not request.url.path.startswith(prefix):
            return httpx.Response(404, json={"message": "Not Found"})
        path = request.url.path[len(prefix):]

        if request.method == "GET":
            if self.fail_listing_with:
                return httpx.Response(self.fail_listing_with, json={"message": "Server Error"})
            entries = [
                self._entry(p) for p in self.files if p.rsplit("/", 1)[0] == path
            ]
            if not entries:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json=entries)

        if self.before_write:
            override = self.before_write(request)
            if isinstance(override, httpx.Response):
                return override
        body = json.loads(request.content)
        existing = self.files.get(path)

        if request.method == "PUT":
            if existing and "sha" not in body:
                return httpx.Response(422, json={"message": "Invalid request.\n\n\"sha\" wasn't supplied."})
            if existing and body["sha"] != existing[1]:
                return httpx.Response(409, json={"message": f"{path} does not match {body['sha']}"})
            content = base64.b64decode(body["content"])
            self.files[path] = (content, self._sha(content))
            return httpx.Response(
                200 if existing else 201,
                json={"content": self._entry(path), "commit": {"message": body["message"]}},
            )

        if request.method == "DELETE":
            if not existing:
                return httpx.Response(404, json={"message": "Not Found"})
            if body.get("sha") != existing[1]:
                return httpx.Response(409, json={"message": f"{path} does not match {body.get('sha')}"})
            del self.files[path]
            return httpx.Response(200, json={"content": None, "commit": {"message": body["message"]}})

        return httpx.Response(405, json={"message": "Method Not Allowed"})


@pytest.fixture
def github_config():
    return GitHubConfig.from_settings(
        Settings(gh_token="ghp_test", gh_repo=f"{OWNER}/{REPO}", _env_file=None)
    )


@pytest.fixture
def fake_github():
    return FakeGitHubRepo()


@pytest.fixture
def image_store(github_config, fake_github):
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(fake_github.handler),
        base_url=github_config.api_url,
    )
    return GitHubContentsClient(github_config, http_client=http_client)


@pytest.fixture(scope="function")
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"


@pytest.fixture(scope="function")
def db_service(aws_credentials):
    with mock_aws():
        yield DynamoDBService()


@pytest.fixture(scope="function")
def test_client(image_store, db_service):
    # The lifespan is not entered, so the services come from the overrides
    app.dependency_overrides[get_image_store] = lambda: image_store
    app.dependency_overrides[get_dynamodb_service] = lambda: db_service
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
