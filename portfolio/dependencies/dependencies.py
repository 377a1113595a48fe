import secrets
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portfolio.storage.dynamodb import DynamoDBService
from portfolio.storage.github import GitHubContentsClient
from portfolio.exceptions import UnauthorizedException
from portfolio.settings import settings

bearer_scheme = HTTPBearer(auto_error=False)

def get_image_store(request: Request) -> GitHubContentsClient:
    """Dependency provider for GitHubContentsClient"""
    return request.app.state.github

def get_dynamodb_service(request: Request) -> DynamoDBService:
    """Dependency provider for DynamoDBService"""
    return request.app.state.db

def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> None:
    """
        Guards mutating routes with ADMIN_TOKEN.
        When ADMIN_TOKEN is unset every request passes, matching the
        client-side-only protection of the admin panel.
    """
    expected = settings.admin_token
    if not expected:
        return
    if credentials is None or not secrets.compare_digest(credentials.credentials, expected):
        raise UnauthorizedException()
