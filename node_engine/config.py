from pydantic_settings import BaseSettings
from pathlib import Path
from typing import Dict, List

# Get the repository root directory (parent of node_engine directory)
REPO_ROOT = Path(__file__).parent.parent.absolute()

class Settings(BaseSettings):
    """Application settings."""

    # API settings
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_RELOAD: bool = True

    # Version and environment
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Registry: node type -> variant used when a node's own variant is unknown
    DEFAULT_VARIANTS: Dict[str, str] = {
        "space": "container_stack",
        "container": "container_stack",
        "collection": "grid_card",
        "item": "list_row",
    }

    # Node ingestion
    REQUIRE_UUID_IDS: bool = True

    # Rendering
    MEMOIZE_RENDERS: bool = False
    RENDER_CACHE_SIZE: int = 512

    # Back-button chain priorities (higher runs first)
    CONTEXT_MENU_BACK_PRIORITY: int = 100
    SHELL_BACK_PRIORITY: int = 15

    # Status cycle used by toggle_status
    STATUS_CYCLE: List[str] = ["active", "completed", "archived"]

    class Config:
        env_file = ".env"

settings = Settings()
