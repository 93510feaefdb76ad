from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    github_token: Optional[str] = Field(default=None, alias="GITHUB_TOKEN")
    github_base_url: HttpUrl = Field(
        default="https://api.github.com", alias="GITHUB_BASE_URL"
    )
    github_proxy: Optional[str] = Field(default=None, alias="GITHUB_PROXY")
    github_user_agent: str = Field(default="gh-repo-proxy", alias="GITHUB_USER_AGENT")
    github_timeout_seconds: float = Field(default=20, alias="GITHUB_TIMEOUT_SECONDS")

    # "best" leaves ordering to GitHub's relevance ranking
    search_sort: Optional[str] = Field(default="stars", alias="SEARCH_SORT")
    enrich_languages: bool = Field(default=False, alias="ENRICH_LANGUAGES")
    language_failure_policy: Literal["skip", "fail"] = Field(
        default="skip", alias="LANGUAGE_FAILURE_POLICY"
    )

    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8020, alias="PORT")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # ignore unrelated env vars to avoid validation errors


@lru_cache
def get_settings() -> Settings:
    return Settings()
