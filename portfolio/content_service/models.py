from enum import Enum
from typing import Optional
from pydantic import BaseModel

class ProjectBase(BaseModel):
    title: str
    description: str
    image: Optional[str] = None
    github: Optional[str] = None
    demo: Optional[str] = None

class ProjectCreate(ProjectBase):
    pass

class ProjectUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    github: Optional[str] = None
    demo: Optional[str] = None

class Project(ProjectBase):
    id: str

class SocialLinkBase(BaseModel):
    title: str
    description: str
    demo: str
    icon: str
    image: Optional[str] = None

class SocialLinkCreate(SocialLinkBase):
    pass

class SocialLinkUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    demo: Optional[str] = None
    icon: Optional[str] = None
    image: Optional[str] = None

class SocialLink(SocialLinkBase):
    id: str

class ToolKind(str, Enum):
    CREATOR = "creator"
    DEV = "dev"

    @property
    def collection(self) -> str:
        return f"{self.value}Tools"

class ToolCreate(BaseModel):
    name: str

class Tool(BaseModel):
    id: str
    name: str
