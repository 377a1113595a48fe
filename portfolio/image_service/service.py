from typing import Tuple
from urllib.parse import quote
import logging

from portfolio.storage.github import GitHubConfig, GitHubContentsClient, is_safe_file_name
from portfolio.image_service.models import DirectoryListing, UploadedFile, ValidationResult
from portfolio.exceptions import ImageNotFoundException, InvalidImageException

log = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
}
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".gif")
MAX_UPLOAD_BYTES = 5 * 1024 * 1024

def validate_upload(content_type: str, size: int) -> ValidationResult:
    """Checks the declared MIME type and byte size of an upload."""
    if content_type not in ALLOWED_IMAGE_TYPES:
        return ValidationResult(valid=False, error="Only JPG, PNG, WebP, and GIF files are allowed")
    if size > MAX_UPLOAD_BYTES:
        return ValidationResult(valid=False, error="File size must be less than 5MB")
    return ValidationResult(valid=True)

def is_image_name(name: str) -> bool:
    return name.lower().endswith(IMAGE_EXTENSIONS)

def validate_file_name(name: str) -> ValidationResult:
    """Checks that an upload name is a plain image file name inside the image directory."""
    if not is_safe_file_name(name):
        return ValidationResult(valid=False, error="File name must not contain path separators, \"..\" or control characters")
    if not is_image_name(name):
        return ValidationResult(valid=False, error="File name must end in .jpg, .jpeg, .png, .webp or .gif")
    return ValidationResult(valid=True)

def public_url(config: GitHubConfig, name: str) -> str:
    """URL the published site serves an image at. Does not check that it exists."""
    return f"{config.public_root}/{config.images_path}/{quote(name)}"

async def list_images(store: GitHubContentsClient) -> DirectoryListing:
    """Lists the image files of the projects directory."""
    listing = await store.list_directory()
    images = [f for f in listing.files if f.type == "file" and is_image_name(f.name)]
    return listing.model_copy(update={"files": images})

async def upload_image(
    store: GitHubContentsClient,
    data: bytes,
    name: str,
    content_type: str,
) -> Tuple[UploadedFile, str]:
    """Validates an upload, commits it to the repository and returns it with its public URL."""
    validation = validate_upload(content_type, len(data))
    if validation.valid:
        validation = validate_file_name(name)
    if not validation.valid:
        log.warning("Upload rejected name=%s content_type=%s error=%s", name, content_type, validation.error)
        raise InvalidImageException(validation.error)

    uploaded = await store.put_file(name, data)
    return uploaded, public_url(store.config, name)

async def delete_image(store: GitHubContentsClient, name: str) -> None:
    """Removes an image from the repository."""
    if not is_safe_file_name(name):
        raise InvalidImageException(f"Invalid file name: {name!r}")
    if not is_image_name(name):
        # Only image files of the directory are managed here
        raise ImageNotFoundException(name)
    await store.delete_file(name)
