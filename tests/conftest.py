import base64
import httpx
import pytest

REPO_METADATA = {
    "name": "demo",
    "description": "A demo repository",
    "language": "Python",
    "topics": ["cli", "llm"],
    "stargazers_count": 42,
    "forks_count": 7,
    "size": 128,
}

VALID_CONFIG = {
    "audience": "conference",
    "timeConstraint": "15min",
    "includeQA": True,
    "includeLiveDemo": True,
}


def file_payload(text: str) -> dict:
    return {
        "type": "file",
        "encoding": "base64",
        "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
    }


def listing_entry(name: str, kind: str = "file", size: int = 0) -> dict:
    return {"name": name, "path": name, "type": kind, "size": size}


def make_transport(routes: dict, requested: list = None) -> httpx.MockTransport:
    """
    routes maps a URL path to (status, json) or to a callable(request) -> Response.
    Unknown paths answer 404.
    """
    def handler(request: httpx.Request) -> httpx.Response:
        if requested is not None:
            requested.append(request.url.path)
        route = routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if callable(route):
            return route(request)
        status, payload = route
        return httpx.Response(status, json=payload)

    return httpx.MockTransport(handler)


def basic_routes(owner: str = "octo", repo: str = "demo") -> dict:
    base = f"/repos/{owner}/{repo}"
    return {
        base: (200, REPO_METADATA),
        f"{base}/contents/README.md": (200, file_payload("# Demo\nHello.")),
        f"{base}/contents": (200, [
            listing_entry("src", "dir"),
            listing_entry("main.py", size=20),
        ]),
        f"{base}/contents/main.py": (200, file_payload("print('hi')\n")),
    }


class FakeGenerator:
    """
    Stands in for GenerationClient: records prompts, returns canned text.
    """

    def __init__(self, reply: str = '{"title": "T", "overview": "O", "sections": []}', configured: bool = True):
        self.reply = reply
        self.is_configured = configured
        self.prompts = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


@pytest.fixture
def fake_generator():
    return FakeGenerator()
