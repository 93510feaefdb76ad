from typing import Iterable, List

from loguru import logger

from ..datasources.base import DataSource, GitHubAPIError, RepoRecord
from ..schemas import RepoWithLanguages


class LanguageEnricher:
    """Attaches per-language byte counts to repository records.

    ``policy`` decides what a failed languages call does inside a batch:
    ``"skip"`` drops that item and keeps going, ``"fail"`` aborts the batch.
    """

    def __init__(self, github: DataSource, policy: str = "skip"):
        if policy not in ("skip", "fail"):
            raise ValueError(f"unknown language failure policy: {policy!r}")
        self.github = github
        self.policy = policy

    async def enrich(self, repo: RepoRecord) -> RepoWithLanguages:
        languages = await self.github.get_languages(repo)
        return RepoWithLanguages(repo=repo, languages=languages)

    async def enrich_all(self, items: Iterable[RepoRecord]) -> List[RepoWithLanguages]:
        results: List[RepoWithLanguages] = []
        # one at a time, in upstream order
        for repo in items:
            try:
                results.append(await self.enrich(repo))
            except GitHubAPIError as exc:
                if self.policy == "fail":
                    raise
                logger.warning(f"[enrich] skipping {repo.get('full_name')}: {exc}")
        return results
