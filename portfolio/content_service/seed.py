"""
    Loads the initial portfolio content into the content table.

    Run with ``python -m portfolio.content_service.seed``.
"""
import logging

from portfolio.storage.dynamodb import DynamoDBService
from portfolio.content_service import service
from portfolio.content_service.models import ProjectCreate, SocialLinkCreate, ToolKind

log = logging.getLogger(__name__)

SEED_PROJECTS = [
    ProjectCreate(
        title="E-Commerce Platform",
        description="Full-stack e-commerce solution with payment integration, admin dashboard, and real-time inventory management.",
        github="https://github.com/milumon/ecommerce-platform",
        demo="https://ecommerce-demo.vercel.app",
    ),
    ProjectCreate(
        title="Task Management App",
        description="Collaborative project management tool with real-time updates, drag-and-drop interface, and team analytics.",
        github="https://github.com/milumon/task-manager",
        demo="https://taskmanager-demo.vercel.app",
    ),
    ProjectCreate(
        title="Weather Dashboard",
        description="Interactive weather application with location-based forecasts, historical data, and customizable widgets.",
        github="https://github.com/milumon/weather-dashboard",
        demo="https://weather-demo.vercel.app",
    ),
]

SEED_SOCIAL_LINKS = [
    SocialLinkCreate(
        title="Instagram",
        description="Follow my latest posts and stories.",
        demo="https://instagram.com",
        icon="Instagram",
    ),
    SocialLinkCreate(
        title="TikTok",
        description="Check out my latest videos and trends.",
        demo="https://tiktok.com",
        icon="TikTokIcon",
    ),
    SocialLinkCreate(
        title="YouTube",
        description="Watch my latest streams and videos.",
        demo="https://youtube.com",
        icon="Youtube",
    ),
]

SEED_CREATOR_TOOLS = [
    "CapCut",
    "OBS Studio",
    "Photoshop",
    "Premiere Pro",
    "After Effects",
    "DaVinci Resolve",
    "Audacity",
    "Streamlabs",
    "Discord",
    "Canva",
]

SEED_DEV_TOOLS = [
    "React",
    "Next.js",
    "TypeScript",
    "Firebase",
    "Tailwind CSS",
    "Framer Motion",
]

def seed_content(db: DynamoDBService) -> None:
    """Inserts the seed records. Running it twice inserts them twice."""
    for project in SEED_PROJECTS:
        service.create_project(db, project)
    for link in SEED_SOCIAL_LINKS:
        service.create_social_link(db, link)
    for name in SEED_CREATOR_TOOLS:
        service.add_tool(db, ToolKind.CREATOR, name)
    for name in SEED_DEV_TOOLS:
        service.add_tool(db, ToolKind.DEV, name)
    log.info(
        "Seeded %d projects, %d social links, %d creator tools, %d dev tools",
        len(SEED_PROJECTS),
        len(SEED_SOCIAL_LINKS),
        len(SEED_CREATOR_TOOLS),
        len(SEED_DEV_TOOLS),
    )

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    db = DynamoDBService()
    seed_content(db)
    db.close()
