import base64
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict

from portfolio.exceptions import (
    ConfigurationError,
    GitHubAPIException,
    ImageNotFoundException,
    InvalidImageException,
    StaleRevisionException,
)
from portfolio.image_service.models import DirectoryListing, ListingStatus, StoredImage, UploadedFile
from portfolio.settings import Settings

log = logging.getLogger(__name__)

# -------------------------
# GitHub configuration
# -------------------------
class GitHubConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    owner: str
    repo: str
    branch: str = "main"
    images_path: str = "public/images/projects"
    api_url: str = "https://api.github.com"
    public_base_url: Optional[str] = None
    timeout_seconds: float = 15.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitHubConfig":
        """Builds the config once at startup. Missing or malformed values are fatal."""
        if not settings.gh_token or not settings.gh_repo:
            raise ConfigurationError(
                "GitHub token and repo are required. Set GH_TOKEN and GH_REPO."
            )
        owner, _, repo = settings.gh_repo.strip().partition("/")
        if not owner or not repo or "/" in repo:
            raise ConfigurationError(
                f"GH_REPO must look like 'owner/repo', got '{settings.gh_repo}'"
            )
        return cls(
            token=settings.gh_token,
            owner=owner,
            repo=repo,
            branch=settings.gh_branch,
            images_path=settings.gh_images_path.strip("/"),
            api_url=settings.github_api_url.rstrip("/"),
            public_base_url=settings.public_base_url.rstrip("/") if settings.public_base_url else None,
            timeout_seconds=settings.github_timeout_seconds,
        )

    @property
    def public_root(self) -> str:
        if self.public_base_url:
            return self.public_base_url
        return f"https://raw.githubusercontent.com/{self.owner}/{self.repo}/{self.branch}"

    @property
    def contents_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}/contents/{self.images_path}"

# -------------------------
# GitHub contents client
# -------------------------
class GitHubContentsClient:
    """CRUD over the files of one directory of a GitHub repository."""

    def __init__(self, config: GitHubConfig, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(
            base_url=config.api_url,
            timeout=config.timeout_seconds,
        )
        log.info(
            "Initialized GitHub client for %s/%s:%s", config.owner, config.repo, config.images_path
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _file_path(self, name: str) -> str:
        """API path of a file in the image directory. Rejects names that would leave it."""
        if not is_safe_file_name(name):
            raise InvalidImageException(f"Invalid file name: {name!r}")
        return f"{self.config.contents_path}/{quote(name, safe='')}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self.client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            log.error("GitHub %s %s failed: %s", method, path, e)
            raise GitHubAPIException(f"GitHub request failed: {e}")

    async def list_directory(self) -> DirectoryListing:
        """Lists the image directory. Failures are reported in the result, not raised."""
        try:
            response = await self._request(
                "GET", self.config.contents_path, params={"ref": self.config.branch}
            )
        except GitHubAPIException as e:
            return DirectoryListing.failed(e.detail)

        if response.status_code == 404:
            log.debug("Directory %s does not exist yet", self.config.images_path)
            return DirectoryListing.absent()
        if not response.is_success:
            message = f"GitHub API error: {response.status_code}"
            log.error("Error fetching %s: %s", self.config.images_path, message)
            return DirectoryListing.failed(message)

        try:
            payload = response.json()
        except ValueError:
            message = f"GitHub returned a non-JSON listing for {self.config.images_path}"
            log.error(message)
            return DirectoryListing.failed(message)
        if not isinstance(payload, list):
            message = f"{self.config.images_path} is not a directory"
            log.error(message)
            return DirectoryListing.failed(message)
        files = [StoredImage.model_validate(entry) for entry in payload]
        return DirectoryListing(status=ListingStatus.POPULATED, files=files)

    async def find_file(self, name: str) -> Optional[StoredImage]:
        """Looks a file up by name through a fresh listing, to learn its current sha."""
        listing = await self.list_directory()
        if listing.status == ListingStatus.ERROR:
            raise GitHubAPIException(listing.error or "Failed to list files")
        return next((f for f in listing.files if f.name == name), None)

    async def put_file(self, name: str, data: bytes) -> UploadedFile:
        """Creates the file, or overwrites it when it already exists."""
        path = self._file_path(name)
        existing = await self.find_file(name)
        verb = "Update" if existing else "Add"
        body = {
            "message": f"{verb} project image: {name}",
            "content": base64.b64encode(data).decode("ascii"),
            "branch": self.config.branch,
        }
        if existing:
            body["sha"] = existing.sha

        response = await self._request("PUT", path, json=body)
        if not response.is_success:
            self._raise_for_write(response, name, "upload")

        content = response.json()["content"]
        log.info("%s %s (sha %s)", "Updated" if existing else "Added", content["path"], content["sha"])
        return UploadedFile.model_validate(content)

    async def delete_file(self, name: str) -> None:
        path = self._file_path(name)
        existing = await self.find_file(name)
        if existing is None:
            raise ImageNotFoundException(name)

        body = {
            "message": f"Delete project image: {name}",
            "sha": existing.sha,
            "branch": self.config.branch,
        }
        response = await self._request("DELETE", path, json=body)
        if response.status_code == 404:
            # Removed by another writer after the listing
            raise ImageNotFoundException(name)
        if not response.is_success:
            self._raise_for_write(response, name, "delete")
        log.info("Deleted %s", existing.path)

    def _raise_for_write(self, response: httpx.Response, name: str, action: str):
        message = _error_message(response)
        log.error("GitHub %s of %s failed (%s): %s", action, name, response.status_code, message)
        if response.status_code == 409 or (response.status_code == 422 and "sha" in message.lower()):
            raise StaleRevisionException(name, message)
        raise GitHubAPIException(
            f"Failed to {action} file: {message}", upstream_status=response.status_code
        )

    async def close(self):
        if self._owns_client:
            await self.client.aclose()
        log.info("Closed GitHub client")

def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return f"HTTP {response.status_code}"

def is_safe_file_name(name: str) -> bool:
    """True when the name stays a single entry of the image directory."""
    if not name or name in (".", "..") or ".." in name:
        return False
    if "/" in name or "\\" in name:
        return False
    return not any(ord(ch) < 32 or ord(ch) == 127 for ch in name)
