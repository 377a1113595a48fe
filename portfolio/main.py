from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import uvicorn
import logging

from portfolio.storage.dynamodb import DynamoDBService
from portfolio.storage.github import GitHubConfig, GitHubContentsClient
from portfolio.settings import settings
from portfolio.routers.image_service import router as image_router
from portfolio.routers.content import router as content_router
from portfolio.exceptions import add_exception_handlers

logging.basicConfig(level=settings.log_level)
log = logging.getLogger("portfolio")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
        Async context manager for FastAPI application lifecycle events.
        Builds the GitHub configuration (fatal when incomplete) and opens
        the GitHub and DynamoDB clients for the application.
    """
    # Initialize resources
    github_config = GitHubConfig.from_settings(settings)
    app.state.github = GitHubContentsClient(github_config)
    app.state.db = DynamoDBService()
    if not settings.admin_token:
        log.warning("ADMIN_TOKEN is not set; admin routes accept unauthenticated requests")
    yield
    # Cleanup resources
    await app.state.github.close()
    app.state.db.close()

# Initialize App
app = FastAPI(
    title=settings.app_title,
    lifespan=lifespan,
    description="Portfolio content and image API",
    root_path="/api"
)

# Add exception handlers
add_exception_handlers(app)

# CORS - Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.cors_origins.split(",")],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add the routers
app.include_router(image_router)
app.include_router(content_router)

# Check Health
@app.get("/")
def read_root():
    """
        Default end point

    """
    return "Portfolio API is running."

if __name__ == "__main__":
    uvicorn.run("portfolio.main:app", host="0.0.0.0", port=8000, reload=True)
