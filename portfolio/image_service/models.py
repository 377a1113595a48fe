from enum import Enum
from typing import List, Optional
from pydantic import BaseModel

class StoredImage(BaseModel):
    """One entry of a GitHub contents directory listing."""
    name: str
    path: str
    sha: str
    size: int
    url: str
    html_url: Optional[str] = None
    git_url: Optional[str] = None
    download_url: Optional[str] = None
    type: str = "file"

class UploadedFile(BaseModel):
    name: str
    path: str
    sha: str
    size: int
    url: str
    download_url: Optional[str] = None

class ListingStatus(str, Enum):
    POPULATED = "populated"
    ABSENT = "absent"
    ERROR = "error"

class DirectoryListing(BaseModel):
    status: ListingStatus
    files: List[StoredImage] = []
    error: Optional[str] = None

    @classmethod
    def absent(cls) -> "DirectoryListing":
        return cls(status=ListingStatus.ABSENT)

    @classmethod
    def failed(cls, error: str) -> "DirectoryListing":
        return cls(status=ListingStatus.ERROR, error=error)

class ValidationResult(BaseModel):
    valid: bool
    error: Optional[str] = None

class ListImagesResponse(BaseModel):
    images: List[StoredImage]

class UploadResponse(BaseModel):
    success: bool = True
    file: UploadedFile
    url: str

class DeleteResponse(BaseModel):
    success: bool = True
    message: str
