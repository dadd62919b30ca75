import os
import logging
from typing import Optional
from pydantic import BaseModel, Field
from dotenv import load_dotenv
from rich.logging import RichHandler

load_dotenv()

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class Settings(BaseModel):
    anthropic_api_key: Optional[str] = Field(None, description="Credential for the generation service")
    github_token: Optional[str] = Field(None, description="Optional token; raises the GitHub API rate limit")
    model_name: str = DEFAULT_MODEL
    host: str = "127.0.0.1"
    port: int = 5000


def load_settings() -> Settings:
    """
    Reads settings from the process environment (and .env, loaded at import).
    Empty strings count as unset.
    """
    return Settings(
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
        github_token=os.getenv("GITHUB_TOKEN") or None,
        model_name=os.getenv("REPOSHOW_MODEL") or DEFAULT_MODEL,
        host=os.getenv("REPOSHOW_HOST") or "127.0.0.1",
        port=int(os.getenv("REPOSHOW_PORT") or 5000),
    )


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=False, show_path=False)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
