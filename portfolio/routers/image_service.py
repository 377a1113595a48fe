from fastapi import APIRouter, Depends, UploadFile, File, Query
from typing import Optional
import logging

from portfolio.storage.github import GitHubContentsClient
from portfolio.dependencies.dependencies import get_image_store, require_admin
from portfolio.image_service.service import list_images, upload_image, delete_image
from portfolio.image_service.models import (
    DeleteResponse,
    ListImagesResponse,
    ListingStatus,
    UploadResponse,
)
from portfolio.exceptions import GitHubAPIException, MissingParameterException

log = logging.getLogger(__name__)

router = APIRouter(
    prefix="/github/images",
    tags=["images"]
)

@router.get("", response_model=ListImagesResponse)
async def list_images_handler(store: GitHubContentsClient = Depends(get_image_store)):
    """Lists the project images stored in the repository."""
    listing = await list_images(store)
    if listing.status == ListingStatus.ERROR:
        log.error("Listing images failed: %s", listing.error)
        raise GitHubAPIException("Failed to fetch images")
    return ListImagesResponse(images=listing.files)

@router.post("", response_model=UploadResponse, dependencies=[Depends(require_admin)])
async def upload_image_handler(
    file: Optional[UploadFile] = File(None),
    store: GitHubContentsClient = Depends(get_image_store),
):
    """Uploads an image, overwriting any image with the same name."""
    if file is None or not file.filename:
        raise MissingParameterException("No file provided")

    contents = await file.read()
    log.debug("Upload received name=%s size=%d type=%s", file.filename, len(contents), file.content_type)

    uploaded, url = await upload_image(
        store,
        data=contents,
        name=file.filename,
        content_type=file.content_type or "",
    )
    return UploadResponse(file=uploaded, url=url)

@router.delete("", response_model=DeleteResponse, dependencies=[Depends(require_admin)])
async def delete_image_handler(
    file_name: Optional[str] = Query(None, alias="fileName"),
    store: GitHubContentsClient = Depends(get_image_store),
):
    """Deletes an image by file name."""
    if not file_name:
        raise MissingParameterException("File name is required")

    await delete_image(store, file_name)
    return DeleteResponse(message=f"File {file_name} deleted successfully")
