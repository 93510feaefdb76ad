import httpx
from typing import Any, Dict, Optional
from urllib.parse import quote
from loguru import logger
from pydantic import ValidationError

from .base import DataSource, GitHubAPIError, RepoRecord
from ..config import Settings, get_settings
from ..schemas import RepositoryPage, RepoWithLanguages


class GitHubAdapter(DataSource):
    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": self.settings.github_user_agent,
        }
        if self.settings.github_token:
            headers["Authorization"] = f"Bearer {self.settings.github_token}"
        self.headers = headers
        client_kwargs: Dict[str, Any] = {
            "base_url": str(self.settings.github_base_url),
            "headers": headers,
            "timeout": self.settings.github_timeout_seconds,
        }
        # socks5:// needs the httpx[socks] extra
        if self.settings.github_proxy:
            client_kwargs["proxy"] = self.settings.github_proxy
        if transport is not None:
            client_kwargs["transport"] = transport
        self.client = httpx.AsyncClient(**client_kwargs)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            resp = await self.client.get(url, params=params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            body = exc.response.text
            status = exc.response.status_code
            raise GitHubAPIError(f"GitHub {status}: {body}", status_code=status) from exc
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise GitHubAPIError(f"GitHub request error: {type(exc).__name__} {repr(exc)}") from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise GitHubAPIError(f"GitHub returned a malformed body for {url}: {exc}") from exc

    async def search_repositories(
        self,
        query: str,
        sort: Optional[str] = None,
        order: str = "desc",
        per_page: Optional[int] = None,
        page: Optional[int] = None,
    ) -> RepositoryPage:
        params: Dict[str, Any] = {"q": query}
        if sort and sort != "best":
            params["sort"] = sort
            params["order"] = order
        if per_page is not None:
            params["per_page"] = per_page
        if page is not None:
            params["page"] = page
        logger.info(f"[search] q={query!r} sort={params.get('sort')} page={page}")

        data = await self._get_json("/search/repositories", params=params)
        if not isinstance(data, dict):
            raise GitHubAPIError(f"GitHub search returned {type(data).__name__}, expected an object")
        try:
            return RepositoryPage(
                items=data.get("items") or [],
                total_count=data.get("total_count") or 0,
                incomplete_results=data.get("incomplete_results") or False,
            )
        except ValidationError as exc:
            raise GitHubAPIError(f"GitHub search returned an unexpected shape: {exc}") from exc

    async def get_repository(self, owner: str, repo: str) -> RepoRecord:
        data = await self._get_json(f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}")
        if not isinstance(data, dict):
            raise GitHubAPIError(
                f"GitHub returned {type(data).__name__} for {owner}/{repo}, expected an object"
            )
        return data

    def _check_same_host(self, url: str) -> None:
        # the client carries the token, so never follow a link off the API host
        try:
            host = httpx.URL(url).host
        except httpx.InvalidURL as exc:
            raise GitHubAPIError(f"Invalid upstream URL {url!r}: {exc}") from exc
        if host and host != self.client.base_url.host:
            raise GitHubAPIError(f"Refusing to follow {url} outside {self.client.base_url.host}")

    async def get_languages(self, repo: RepoRecord) -> Dict[str, int]:
        languages_url = repo.get("languages_url")
        if not languages_url:
            raise GitHubAPIError(f"Repository {repo.get('full_name')} has no languages_url")
        if not isinstance(languages_url, str):
            raise GitHubAPIError(
                f"Repository {repo.get('full_name')} has a non-string languages_url: {languages_url!r}"
            )
        self._check_same_host(languages_url)

        data = await self._get_json(languages_url)
        try:
            # reuse the byte-count validation of the response model
            return RepoWithLanguages(repo=repo, languages=data).languages
        except ValidationError as exc:
            raise GitHubAPIError(
                f"GitHub returned malformed languages for {repo.get('full_name')}: {exc}"
            ) from exc
