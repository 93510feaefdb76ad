from typing import Any, Dict, List

from pydantic import BaseModel, Field, conint, field_validator


class RepoRequest(BaseModel):
    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)

    @field_validator("owner", "repo")
    @classmethod
    def not_a_dot_segment(cls, value: str) -> str:
        # "." and ".." survive percent-encoding and would be collapsed out of the path
        if value in (".", ".."):
            raise ValueError("must be a repository or owner name, not a path segment")
        return value


class RepositoryPage(BaseModel):
    items: List[Dict[str, Any]]
    total_count: int = 0
    incomplete_results: bool = False


class RepoWithLanguages(BaseModel):
    repo: Dict[str, Any]
    languages: Dict[str, conint(ge=0)]
