from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .config import Settings, get_settings
from .datasources.base import GitHubAPIError
from .datasources.github_adapter import GitHubAdapter
from .schemas import RepoRequest, RepositoryPage, RepoWithLanguages
from .services.enricher import LanguageEnricher

settings = get_settings()
github = GitHubAdapter(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting server (enrich_languages={settings.enrich_languages}, sort={settings.search_sort})")
    yield
    await github.aclose()
    logger.info("Server stopped")


app = FastAPI(title="GitHub Repo Proxy", version="0.4.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["Content-Type"],
)


def get_github() -> GitHubAdapter:
    return github


def get_enricher(
    github: GitHubAdapter = Depends(get_github),
    settings: Settings = Depends(get_settings),
) -> LanguageEnricher:
    return LanguageEnricher(github, policy=settings.language_failure_policy)


def upstream_error(exc: GitHubAPIError) -> HTTPException:
    logger.error(f"Upstream failure: {exc}")
    return HTTPException(status_code=500, detail=str(exc))


@app.get("/health")
async def health():
    return {"status": "ok", "timestamp": datetime.utcnow().isoformat()}


@app.get("/search")
async def search_repository(
    repo: str = Query(..., min_length=1),
    per_page: Optional[int] = Query(None, ge=1, le=100),
    page: Optional[int] = Query(None, ge=1),
    settings: Settings = Depends(get_settings),
    github: GitHubAdapter = Depends(get_github),
    enricher: LanguageEnricher = Depends(get_enricher),
) -> Union[RepositoryPage, List[RepoWithLanguages]]:
    try:
        result = await github.search_repositories(
            repo, sort=settings.search_sort, order="desc", per_page=per_page, page=page
        )
    except GitHubAPIError as exc:
        raise upstream_error(exc)

    if not settings.enrich_languages:
        return result
    try:
        return await enricher.enrich_all(result.items)
    except GitHubAPIError as exc:
        # only reachable under the "fail" policy
        raise upstream_error(exc)


@app.api_route("/repo", methods=["GET", "POST"])
async def get_repository(
    body: RepoRequest,
    settings: Settings = Depends(get_settings),
    github: GitHubAdapter = Depends(get_github),
    enricher: LanguageEnricher = Depends(get_enricher),
):
    try:
        record = await github.get_repository(body.owner, body.repo)
        if not settings.enrich_languages:
            return record
        return await enricher.enrich(record)
    except GitHubAPIError as exc:
        raise upstream_error(exc)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
