from fastapi import APIRouter, Depends, Query, Response
from typing import List, Optional
import logging

from portfolio.storage.dynamodb import DynamoDBService
from portfolio.dependencies.dependencies import get_dynamodb_service, require_admin
from portfolio.content_service import service
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
from portfolio.exceptions import MissingParameterException

log = logging.getLogger(__name__)

router = APIRouter(tags=["content"])

admin = [Depends(require_admin)]

# ------------------------------
# Projects
# ------------------------------

@router.get("/projects", response_model=List[Project])
def list_projects(db: DynamoDBService = Depends(get_dynamodb_service)):
    return service.list_projects(db)

@router.post("/projects", response_model=Project, status_code=201, dependencies=admin)
def create_project(project: ProjectCreate, db: DynamoDBService = Depends(get_dynamodb_service)):
    return service.create_project(db, project)

@router.put("/projects/{project_id}", response_model=Project, dependencies=admin)
def update_project(
    project_id: str,
    changes: ProjectUpdate,
    db: DynamoDBService = Depends(get_dynamodb_service),
):
    """Updates only the fields present in the body."""
    return service.update_project(db, project_id, changes)

@router.delete("/projects/{project_id}", status_code=204, dependencies=admin)
def delete_project(project_id: str, db: DynamoDBService = Depends(get_dynamodb_service)):
    service.delete_project(db, project_id)
    return Response(status_code=204)

# ------------------------------
# Social links
# ------------------------------

@router.get("/social-links", response_model=List[SocialLink])
def list_social_links(db: DynamoDBService = Depends(get_dynamodb_service)):
    return service.list_social_links(db)

@router.post("/social-links", response_model=SocialLink, status_code=201, dependencies=admin)
def create_social_link(link: SocialLinkCreate, db: DynamoDBService = Depends(get_dynamodb_service)):
    return service.create_social_link(db, link)

@router.put("/social-links/{link_id}", response_model=SocialLink, dependencies=admin)
def update_social_link(
    link_id: str,
    changes: SocialLinkUpdate,
    db: DynamoDBService = Depends(get_dynamodb_service),
):
    return service.update_social_link(db, link_id, changes)

@router.delete("/social-links/{link_id}", status_code=204, dependencies=admin)
def delete_social_link(link_id: str, db: DynamoDBService = Depends(get_dynamodb_service)):
    service.delete_social_link(db, link_id)
    return Response(status_code=204)

# ------------------------------
# Tools
# ------------------------------

@router.get("/tools/{kind}", response_model=List[str])
def list_tool_names(kind: ToolKind, db: DynamoDBService = Depends(get_dynamodb_service)):
    """Tool names in storage order."""
    return service.list_tool_names(db, kind)

@router.get("/tools/{kind}/items", response_model=List[Tool])
def list_tools(kind: ToolKind, db: DynamoDBService = Depends(get_dynamodb_service)):
    return service.list_tools(db, kind)

@router.post("/tools/{kind}", response_model=Tool, status_code=201, dependencies=admin)
def add_tool(kind: ToolKind, tool: ToolCreate, db: DynamoDBService = Depends(get_dynamodb_service)):
    return service.add_tool(db, kind, tool.name)

@router.delete("/tools/{kind}", status_code=204, dependencies=admin)
def delete_tool_by_name(
    kind: ToolKind,
    name: Optional[str] = Query(None),
    db: DynamoDBService = Depends(get_dynamodb_service),
):
    if not name:
        raise MissingParameterException("Tool name is required")
    service.delete_tool_by_name(db, kind, name)
    return Response(status_code=204)

@router.delete("/tools/{kind}/{tool_id}", status_code=204, dependencies=admin)
def delete_tool(kind: ToolKind, tool_id: str, db: DynamoDBService = Depends(get_dynamodb_service)):
    service.delete_tool(db, kind, tool_id)
    return Response(status_code=204)
