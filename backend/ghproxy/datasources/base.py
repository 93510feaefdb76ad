from typing import Any, Dict, Optional, Protocol

from ..schemas import RepositoryPage

# Upstream repository records are passed through untouched.
RepoRecord = Dict[str, Any]


class GitHubAPIError(RuntimeError):
    """Any failure talking to GitHub: transport, status, body shape or missing field."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DataSource(Protocol):
    async def search_repositories(
        self,
        query: str,
        sort: Optional[str] = None,
        order: str = "desc",
        per_page: Optional[int] = None,
        page: Optional[int] = None,
    ) -> RepositoryPage:
        ...

    async def get_repository(self, owner: str, repo: str) -> RepoRecord:
        ...

    async def get_languages(self, repo: RepoRecord) -> Dict[str, int]:
        ...
