from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class KeyFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    content: str = Field(..., description="Decoded file content, truncated by the probe")
    category: str = Field(default="Other", description="Human label derived from the file extension")


class RepositoryStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    stars: int = 0
    forks: int = 0
    size_kb: int = 0


class RepositoryAnalysis(BaseModel):
    """
    Bounded snapshot of a repository: the only input to prompt assembly.
    Every string in here has been truncated by the probe before construction.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    language: str = "Unknown"
    topics: List[str] = Field(default_factory=list)
    readme: str = ""
    manifest: Optional[Any] = Field(None, description="Parsed package.json, or {'kind', 'rawContent'} for other manifests")
    file_structure: List[str] = Field(default_factory=list)
    key_files: List[KeyFile] = Field(default_factory=list)
    stats: RepositoryStats = Field(default_factory=RepositoryStats)
