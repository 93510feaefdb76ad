from typing import Any, Callable, Dict, List, Union

import httpx
import pytest
from fastapi.testclient import TestClient

from ghproxy.config import Settings, get_settings
from ghproxy.datasources.github_adapter import GitHubAdapter
from ghproxy.main import app, get_github

API = "https://api.github.com"

Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


def make_repo(full_name: str, **extra) -> Dict[str, Any]:
    owner, name = full_name.split("/")
    repo = {
        "id": sum(map(ord, full_name)),
        "name": name,
        "full_name": full_name,
        "owner": {"login": owner, "type": "User"},
        "html_url": f"https://github.com/{full_name}",
        "description": f"{name} description",
        "stargazers_count": 42,
        "languages_url": f"{API}/repos/{full_name}/languages",
    }
    repo.update(extra)
    return repo


class FakeGitHub:
    """Canned upstream keyed by request path; records every request it sees."""

    def __init__(self, routes: Dict[str, Route]):
        self.routes = routes
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if callable(route):
            return route(request)
        return route

    @property
    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]


def make_settings(**overrides) -> Settings:
    values = {
        "github_token": "test-token",
        "github_base_url": API,
        "search_sort": "stars",
        "enrich_languages": False,
        "language_failure_policy": "skip",
    }
    values.update(overrides)
    # construct through the env aliases, same as a deployment would
    return Settings(**{Settings.model_fields[k].alias: v for k, v in values.items()})


def make_github(routes: Dict[str, Route], **overrides):
    upstream = FakeGitHub(routes)
    adapter = GitHubAdapter(make_settings(**overrides), transport=httpx.MockTransport(upstream))
    return adapter, upstream


@pytest.fixture
def client_factory():
    def build(routes: Dict[str, Route], **overrides):
        settings = make_settings(**overrides)
        upstream = FakeGitHub(routes)
        adapter = GitHubAdapter(settings, transport=httpx.MockTransport(upstream))
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_github] = lambda: adapter
        return TestClient(app), upstream

    yield build
    app.dependency_overrides.clear()
