"""Shared test configuration: an in-memory Bitbucket Server behind httpx.MockTransport."""

import json
from typing import Any

import httpx
import pytest


BASE_URL = "https://bitbucket.example.com"
TOKEN = "test-token"
API_PREFIX = "/rest/api/1.0/"


def json_response(status_code: int, data: Any) -> httpx.Response:
    return httpx.Response(status_code, json=data)


class FakeBitbucketServer:
    """
    Minimal Bitbucket Server REST API over an in-memory store.

    Implements the repository and group-permission endpoints the clients
    use, checks the bearer token, and records every request.
    """

    def __init__(self, token: str = TOKEN, page_size: int = 25) -> None:
        self.token = token
        self.page_size = page_size
        self.projects: dict[str, dict[str, Any]] = {
            "CORE": {"id": 1, "key": "CORE", "name": "Core", "public": False}
        }
        self.repos: dict[tuple[str, str], dict[str, Any]] = {}
        self.grants: dict[tuple[str, str], dict[str, str]] = {}
        self.requests: list[httpx.Request] = []
        self._next_id = 100

    # Setup -----------------------------------------------------------------

    def add_repo(
        self,
        project: str,
        name: str,
        description: str | None = None,
        public: bool = False,
        groups: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        repo = self._repo_json(project, name, description, public)
        self.repos[(project, name)] = repo
        self.grants[(project, name)] = dict(groups or {})
        return repo

    def mutations(self) -> list[tuple[str, str]]:
        """(method, path-with-query) of every non-GET request."""
        return [
            (r.method, _api_path(r) + (f"?{r.url.query.decode()}" if r.url.query else ""))
            for r in self.requests
            if r.method != "GET"
        ]

    # Dispatch --------------------------------------------------------------

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.headers.get("Authorization") != f"Bearer {self.token}":
            return json_response(401, {"errors": [{"message": "Authentication failed"}]})

        parts = _api_path(request).split("/")
        method = request.method

        if parts == ["projects"] and method == "GET":
            return self._page(request, list(self.projects.values()))
        if len(parts) == 2 and parts[0] == "projects" and method == "GET":
            project = self.projects.get(parts[1])
            return json_response(200, project) if project else _not_found()
        if len(parts) == 3 and parts[0] == "projects" and parts[2] == "repos":
            if method == "POST":
                return self._create(parts[1], request)
        if len(parts) == 4 and parts[0] == "projects" and parts[2] == "repos":
            return self._repo(method, (parts[1], parts[3]), request)
        if len(parts) == 6 and parts[4:] == ["permissions", "groups"]:
            return self._groups(method, (parts[1], parts[3]), request)

        return _not_found()

    def _create(self, project: str, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        key = (project, body["name"])
        if key in self.repos:
            return json_response(409, {"errors": [{"message": "Repository exists"}]})
        repo = self.add_repo(project, body["name"], body.get("description"), body.get("public", False))
        return json_response(201, repo)

    def _repo(self, method: str, key: tuple[str, str], request: httpx.Request) -> httpx.Response:
        if key not in self.repos:
            return _not_found()
        if method == "GET":
            return json_response(200, self.repos[key])
        if method == "PUT":
            body = json.loads(request.content)
            repo = self.repos[key]
            repo["public"] = body.get("public", False)
            if body.get("description"):
                repo["description"] = body["description"]
            else:
                repo.pop("description", None)
            return json_response(200, repo)
        if method == "DELETE":
            del self.repos[key]
            self.grants.pop(key, None)
            return httpx.Response(202)
        return json_response(405, {})

    def _groups(self, method: str, key: tuple[str, str], request: httpx.Request) -> httpx.Response:
        if key not in self.repos:
            return _not_found()
        grants = self.grants[key]
        params = request.url.params
        if method == "GET":
            values = [
                {"group": {"name": name}, "permission": permission}
                for name, permission in grants.items()
            ]
            return self._page(request, values)
        if method == "PUT":
            grants[params["name"]] = params["permission"]
            return httpx.Response(204)
        if method == "DELETE":
            grants.pop(params["name"], None)
            return httpx.Response(204)
        return json_response(405, {})

    # Helpers ---------------------------------------------------------------

    def _page(self, request: httpx.Request, values: list[Any]) -> httpx.Response:
        start = int(request.url.params.get("start", "0"))
        chunk = values[start : start + self.page_size]
        is_last = start + self.page_size >= len(values)
        page: dict[str, Any] = {
            "size": len(chunk),
            "limit": self.page_size,
            "start": start,
            "isLastPage": is_last,
            "values": chunk,
        }
        if not is_last:
            page["nextPageStart"] = start + self.page_size
        return json_response(200, page)

    def _repo_json(
        self, project: str, name: str, description: str | None, public: bool
    ) -> dict[str, Any]:
        self._next_id += 1
        repo: dict[str, Any] = {
            "id": self._next_id,
            "slug": name,
            "name": name,
            "project": {"key": project},
            "public": public,
            "state": "AVAILABLE",
        }
        if description:
            repo["description"] = description
        return repo


def _api_path(request: httpx.Request) -> str:
    path = request.url.path
    return path[len(API_PREFIX):] if path.startswith(API_PREFIX) else path


def _not_found() -> httpx.Response:
    return json_response(404, {"errors": [{"message": "Not found"}]})


@pytest.fixture
def server() -> FakeBitbucketServer:
    """Provide an empty fake Bitbucket server with a CORE project."""
    return FakeBitbucketServer()


@pytest.fixture
def mock_transport(server: FakeBitbucketServer) -> httpx.MockTransport:
    """Provide an httpx transport routing requests to ``server``."""
    return httpx.MockTransport(server)
