import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app.deps import get_api_transport
from main import app

from factories import GYM_ID, USER_ID, make_token

API_PREFIX = "/api"


class FakeBackend:
    """Records every backend call and answers from a route table"""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def on(self, method: str, path: str, json_body=None, status_code: int = 200, content: bytes = None):
        self.routes[(method.upper(), path)] = (status_code, json_body, content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]

        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(200)

        status_code, body, content = route
        if content is not None:
            return httpx.Response(status_code, content=content)
        if body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=body)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method.upper() and r.url.path == API_PREFIX + path
        ]

    def last_json(self, method: str, path: str):
        matches = self.calls(method, path)
        assert matches, f"no {method} {path} call was made"
        return json.loads(matches[-1].content)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def client(backend):
    app.dependency_overrides[get_api_transport] = lambda: httpx.MockTransport(backend.handler)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sign_in(client, backend):
    def _sign_in(role="Admin", gym_id=GYM_ID, time_zone="Asia/Karachi"):
        backend.on("POST", "/auth/login", {
            "token": make_token(role),
            "user": {"id": USER_ID, "email": "owner@example.com"},
            "profile": {"firstName": "Sara", "lastName": "Malik", "gymId": gym_id, "timeZone": time_zone},
        })
        response = client.post(
            "/auth/login",
            data={"email": "owner@example.com", "password": "secret123"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        return response

    return _sign_in
