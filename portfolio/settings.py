from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_title: str = "Portfolio Admin API"
    log_level: str = "INFO"
    cors_origins: str = "*"  # Comma separated

    # GitHub image store
    gh_token: Optional[str] = None
    gh_repo: Optional[str] = None  # "owner/repo"
    gh_branch: str = "main"
    gh_images_path: str = "public/images/projects"
    github_api_url: str = "https://api.github.com"
    public_base_url: Optional[str] = None  # defaults to raw.githubusercontent.com/<owner>/<repo>/<branch>
    github_timeout_seconds: float = 15.0

    # DynamoDB content store
    aws_region: str = "us-east-1"
    aws_endpoint_url: Optional[str] = None
    aws_access_key_id: str = "test"
    aws_secret_access_key: str = "test"
    content_table: str = "PortfolioContent"

    # Bearer token required on mutating routes when set
    admin_token: Optional[str] = None

settings = Settings()
