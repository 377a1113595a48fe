import base64
import json

import httpx
import pytest

from portfolio.settings import Settings
from portfolio.storage.github import GitHubConfig, GitHubContentsClient
from portfolio.image_service.models import ListingStatus
from portfolio.exceptions import (
    ConfigurationError,
    GitHubAPIException,
    ImageNotFoundException,
    InvalidImageException,
    StaleRevisionException,
)


def make_settings(**overrides):
    return Settings(_env_file=None, **overrides)


# ------------------------------
# GitHubConfig
# ------------------------------

def test_config_from_settings():
    config = GitHubConfig.from_settings(make_settings(gh_token="t", gh_repo="octo/site", gh_branch="gh-pages"))
    assert config.owner == "octo"
    assert config.repo == "site"
    assert config.contents_path == "/repos/octo/site/contents/public/images/projects"
    assert config.public_root == "https://raw.githubusercontent.com/octo/site/gh-pages"


@pytest.mark.parametrize("overrides", [
    {"gh_repo": "octo/site"},
    {"gh_token": "t"},
    {"gh_token": "", "gh_repo": "octo/site"},
])
def test_config_requires_token_and_repo(overrides):
    with pytest.raises(ConfigurationError):
        GitHubConfig.from_settings(make_settings(**overrides))


@pytest.mark.parametrize("repo", ["octo", "octo/", "/site", "octo/site/extra"])
def test_config_rejects_malformed_repo(repo):
    with pytest.raises(ConfigurationError):
        GitHubConfig.from_settings(make_settings(gh_token="t", gh_repo=repo))


# ------------------------------
# Request shapes
# ------------------------------

@pytest.mark.asyncio
async def test_requests_carry_bearer_token(image_store, fake_github):
    await image_store.list_directory()
    request = fake_github.requests[0]
    assert request.headers["Authorization"] == "Bearer ghp_test"
    assert request.headers["Accept"] == "application/vnd.github+json"
    assert request.url.params["ref"] == "main"


@pytest.mark.asyncio
async def test_put_new_file_sends_base64_without_sha(image_store, fake_github):
    await image_store.put_file("new.png", b"\x89PNG data")

    listing_request, put_request = fake_github.requests
    assert listing_request.method == "GET"
    assert put_request.method == "PUT"
    body = json.loads(put_request.content)
    assert base64.b64decode(body["content"]) == b"\x89PNG data"
    assert body["message"] == "Add project image: new.png"
    assert body["branch"] == "main"
    assert "sha" not in body


@pytest.mark.asyncio
async def test_put_existing_file_sends_current_sha(image_store, fake_github):
    sha = fake_github.add("old.png", b"before")

    uploaded = await image_store.put_file("old.png", b"after")

    body = json.loads(fake_github.requests[-1].content)
    assert body["sha"] == sha
    assert body["message"] == "Update project image: old.png"
    assert uploaded.sha != sha
    assert uploaded.size == len(b"after")


@pytest.mark.asyncio
async def test_delete_sends_current_sha(image_store, fake_github):
    sha = fake_github.add("gone.gif", b"gif")

    await image_store.delete_file("gone.gif")

    delete_request = fake_github.requests[-1]
    assert delete_request.method == "DELETE"
    assert json.loads(delete_request.content)["sha"] == sha
    assert fake_github.files == {}


@pytest.mark.asyncio
async def test_delete_missing_file_makes_no_delete_call(image_store, fake_github):
    with pytest.raises(ImageNotFoundException):
        await image_store.delete_file("nope.png")
    assert [r.method for r in fake_github.requests] == ["GET"]


# ------------------------------
# Failures
# ------------------------------

@pytest.mark.asyncio
async def test_listing_not_found_is_absent(image_store):
    listing = await image_store.list_directory()
    assert listing.status == ListingStatus.ABSENT


@pytest.mark.asyncio
async def test_listing_transport_error_is_reported(github_config):
    def broken(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(broken), base_url=github_config.api_url)
    store = GitHubContentsClient(github_config, http_client=client)

    listing = await store.list_directory()
    assert listing.status == ListingStatus.ERROR
    assert "connection refused" in listing.error


@pytest.mark.asyncio
async def test_write_refuses_to_proceed_when_listing_fails(image_store, fake_github):
    fake_github.fail_listing_with = 502
    with pytest.raises(GitHubAPIException):
        await image_store.put_file("a.png", b"x")
    assert all(r.method == "GET" for r in fake_github.requests)


@pytest.mark.asyncio
async def test_upstream_rejection_surfaces_message(github_config):
    def handler(request):
        if request.method == "GET":
            return httpx.Response(404, json={"message": "Not Found"})
        return httpx.Response(403, json={"message": "Resource not accessible by integration"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=github_config.api_url)
    store = GitHubContentsClient(github_config, http_client=client)

    with pytest.raises(GitHubAPIException) as exc:
        await store.put_file("a.png", b"x")
    assert exc.value.upstream_status == 403
    assert exc.value.detail == "Failed to upload file: Resource not accessible by integration"


@pytest.mark.asyncio
async def test_missing_sha_rejection_is_stale(image_store, fake_github):
    def concurrent_create(request):
        fake_github.add("a.png", b"someone else")

    fake_github.before_write = concurrent_create
    with pytest.raises(StaleRevisionException):
        await image_store.put_file("a.png", b"mine")


@pytest.mark.asyncio
async def test_delete_with_stale_sha(image_store, fake_github):
    fake_github.add("a.png", b"v1")

    def concurrent_update(request):
        fake_github.add("a.png", b"v2")

    fake_github.before_write = concurrent_update
    with pytest.raises(StaleRevisionException):
        await image_store.delete_file("a.png")
    assert "public/images/projects/a.png" in fake_github.files


@pytest.mark.asyncio
async def test_close_keeps_injected_client_open(image_store):
    await image_store.close()
    assert not image_store.client.is_closed


@pytest.mark.asyncio
async def test_file_names_are_percent_encoded(image_store, fake_github):
    await image_store.put_file("cover #2?.png", b"x")

    put_request = fake_github.requests[-1]
    assert put_request.url.raw_path.decode().endswith("/contents/public/images/projects/cover%20%232%3F.png")
    assert "public/images/projects/cover #2?.png" in fake_github.files


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["../x.png", "a/b.png", "a\\b.png", "..", "bad\nname.png", ""])
async def test_unsafe_names_never_reach_github(image_store, fake_github, name):
    with pytest.raises(InvalidImageException):
        await image_store.put_file(name, b"x")
    with pytest.raises(InvalidImageException):
        await image_store.delete_file(name)
    assert fake_github.requests == []


@pytest.mark.asyncio
async def test_listing_with_non_json_body_is_reported(github_config):
    def handler(request):
        return httpx.Response(200, text="<html>maintenance</html>")

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=github_config.api_url)
    store = GitHubContentsClient(github_config, http_client=client)

    listing = await store.list_directory()
    assert listing.status == ListingStatus.ERROR
    assert "non-JSON" in listing.error
