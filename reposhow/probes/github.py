import os
import re
import json
import base64
import asyncio
import logging
from typing import Dict, Any, Optional, List, Tuple
from urllib.parse import quote

import httpx

from reposhow.errors import (
    AccessForbiddenError,
    FetchError,
    InvalidUrlError,
    RepositoryNotFoundError,
)
from reposhow.models.analysis import KeyFile, RepositoryAnalysis, RepositoryStats
from reposhow.probes.files import file_category, is_key_file

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"

# owner/repo, optional .git, then anything after a '/', '?' or '#'
REPO_URL_PATTERN = re.compile(
    r"^(?:https?://)?(?:www\.)?github\.com/([^/\s?#]+)/([^/\s?#]+?)(?:\.git)?(?:[/?#].*)?$",
    re.IGNORECASE,
)

README_FILES = ["README.md", "readme.md", "README.rst", "README.txt", "README"]
MANIFEST_FILES = ["package.json", "pyproject.toml", "Cargo.toml", "go.mod", "pom.xml"]

MAX_README_CHARS = 5000
MAX_KEY_FILE_CHARS = 3000
MAX_FILE_BYTES = 50000
MAX_LISTING_ENTRIES = 30
MAX_MANIFEST_CHARS = 5000
MAX_NAME_CHARS = 200
MAX_DESCRIPTION_CHARS = 1000
MAX_TOPICS = 20
MAX_TOPIC_CHARS = 50
MAX_LANGUAGE_CHARS = 100
MAX_ENTRY_NAME_CHARS = 255

NOT_FOUND_MESSAGE = "Repository not found. Please check that the repository exists and is public."
FORBIDDEN_MESSAGE = "Access forbidden. The repository may be private or you may have hit rate limits."
INVALID_URL_MESSAGE = "Invalid GitHub URL format. Please provide a valid GitHub repository URL."


def is_repo_url(url: str) -> bool:
    return isinstance(url, str) and REPO_URL_PATTERN.match(url.strip()) is not None


def parse_repo_url(url: str) -> Tuple[str, str]:
    """
    Extracts (owner, repo) from a GitHub repository URL.
    Raises InvalidUrlError without touching the network.
    """
    match = REPO_URL_PATTERN.match(url.strip()) if isinstance(url, str) else None
    if not match:
        raise InvalidUrlError(INVALID_URL_MESSAGE)

    owner, repo = match.group(1), match.group(2)
    if repo.lower().endswith(".git"):
        repo = repo[:-4]
    if not repo:
        raise InvalidUrlError(INVALID_URL_MESSAGE)
    return owner, repo


def decode_content(encoded: str) -> Optional[str]:
    """
    Decodes a base64 `content` field from the contents API. None on failure.
    """
    try:
        return base64.b64decode(encoded).decode("utf-8")
    except (ValueError, TypeError):
        # binascii.Error and UnicodeDecodeError are both ValueErrors
        return None


class GithubProbe:
    """
    Read-only client for the GitHub REST API that builds a bounded
    RepositoryAnalysis. One probe per request; nothing is cached.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = GITHUB_API_URL,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token or os.getenv("GITHUB_TOKEN")
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "RepoShow/0.1",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            self.auth_headers = {
                **self.headers,
                "Authorization": f"Bearer {self.token}"
            }
        else:
            self.auth_headers = self.headers

    def analyze_repository(self, owner: str, repo: str) -> RepositoryAnalysis:
        return asyncio.run(self.analyze(owner, repo))

    async def analyze(self, owner: str, repo: str) -> RepositoryAnalysis:
        async with httpx.AsyncClient(
            base_url=self.api_url,
            headers=self.auth_headers,
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True,
        ) as client:
            # 1. Metadata (mandatory)
            repo_data = await self._fetch_repository(client, owner, repo)

            # 2-4. Best-effort phases
            readme = await self._fetch_readme(client, owner, repo)
            manifest = await self._fetch_manifest(client, owner, repo)
            file_structure, key_files = await self._fetch_structure(client, owner, repo)

        topics = [str(t)[:MAX_TOPIC_CHARS] for t in (repo_data.get("topics") or [])][:MAX_TOPICS]
        return RepositoryAnalysis(
            name=str(repo_data.get("name") or repo)[:MAX_NAME_CHARS],
            description=(repo_data.get("description") or "")[:MAX_DESCRIPTION_CHARS],
            language=str(repo_data.get("language") or "Unknown")[:MAX_LANGUAGE_CHARS],
            topics=topics,
            readme=readme[:MAX_README_CHARS],
            manifest=manifest,
            file_structure=file_structure,
            key_files=key_files,
            stats=RepositoryStats(
                stars=int(repo_data.get("stargazers_count") or 0),
                forks=int(repo_data.get("forks_count") or 0),
                size_kb=int(repo_data.get("size") or 0),
            ),
        )

    async def _fetch_repository(self, client: httpx.AsyncClient, owner: str, repo: str) -> Dict[str, Any]:
        try:
            response = await client.get(self._repo_path(owner, repo))
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to access repository: {e}") from e

        if response.status_code == 404:
            raise RepositoryNotFoundError(NOT_FOUND_MESSAGE)
        if response.status_code in (403, 429):
            raise AccessForbiddenError(FORBIDDEN_MESSAGE)
        if not response.is_success:
            raise FetchError(f"Failed to access repository: {self._error_message(response)}")

        try:
            data = response.json()
        except ValueError as e:
            raise FetchError("Failed to access repository: GitHub returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise FetchError("Failed to access repository: unexpected metadata payload")
        return data

    async def _fetch_file(self, client: httpx.AsyncClient, owner: str, repo: str, path: str) -> Optional[str]:
        """
        Decoded text of one file, or None if it is missing, not a file,
        or not decodable. Never raises for upstream failures.
        """
        try:
            response = await client.get(f"{self._repo_path(owner, repo)}/contents/{quote(path)}")
            if response.status_code != 200:
                return None
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("Lookup of %s/%s:%s failed: %s", owner, repo, path, e)
            return None

        if not isinstance(data, dict) or data.get("type") != "file":
            return None
        if data.get("encoding", "base64") != "base64" or "content" not in data:
            return None
        return decode_content(data["content"])

    async def _fetch_readme(self, client: httpx.AsyncClient, owner: str, repo: str) -> str:
        for name in README_FILES:
            text = await self._fetch_file(client, owner, repo, name)
            if text is not None:
                return text[:MAX_README_CHARS]
        return ""

    async def _fetch_manifest(self, client: httpx.AsyncClient, owner: str, repo: str) -> Optional[Any]:
        for name in MANIFEST_FILES:
            text = await self._fetch_file(client, owner, repo, name)
            if text is None:
                continue
            # Only JSON manifests under the size ceiling are parsed, so the
            # parsed payload stays bounded too.
            if name == "package.json" and len(text) < MAX_FILE_BYTES:
                try:
                    return json.loads(text)
                except ValueError:
                    logger.debug("Ignoring unparseable %s in %s/%s", name, owner, repo)
                    continue
            return {"kind": name, "rawContent": text[:MAX_MANIFEST_CHARS]}
        return None

    async def _fetch_structure(
        self, client: httpx.AsyncClient, owner: str, repo: str
    ) -> Tuple[List[str], List[KeyFile]]:
        try:
            response = await client.get(f"{self._repo_path(owner, repo)}/contents")
            contents = response.json() if response.status_code == 200 else None
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Could not list %s/%s: %s", owner, repo, e)
            contents = None

        if not isinstance(contents, list):
            return [], []

        entries = [e for e in contents if isinstance(e, dict) and e.get("name") and isinstance(e["name"], str)]
        entries = sorted(
            entries,
            key=lambda e: (e.get("type") != "dir", e["name"].lower(), e["name"]),
        )[:MAX_LISTING_ENTRIES]

        file_structure = []
        candidates = []
        for entry in entries:
            kind = str(entry.get("type", "file"))[:MAX_ENTRY_NAME_CHARS]
            suffix = "/" if kind == "dir" else ""
            file_structure.append(f"{kind}: {entry['name'][:MAX_ENTRY_NAME_CHARS]}{suffix}")

            size = entry.get("size") or 0
            if kind == "file" and is_key_file(entry["name"]) and 0 < size < MAX_FILE_BYTES:
                candidates.append(entry["name"])

        # Independent fetches; gather keeps listing order.
        results = await asyncio.gather(
            *[self._fetch_key_file(client, owner, repo, name) for name in candidates]
        )
        key_files = [kf for kf in results if kf is not None]
        return file_structure, key_files

    async def _fetch_key_file(
        self, client: httpx.AsyncClient, owner: str, repo: str, name: str
    ) -> Optional[KeyFile]:
        try:
            text = await self._fetch_file(client, owner, repo, name)
        except Exception as e:
            logger.warning("Failed to retrieve %s: %s", name, e)
            return None

        if text is None:
            logger.warning("Failed to retrieve %s, skipping", name)
            return None
        return KeyFile(
            path=name[:MAX_ENTRY_NAME_CHARS],
            content=text[:MAX_KEY_FILE_CHARS],
            category=file_category(name),
        )

    def _repo_path(self, owner: str, repo: str) -> str:
        return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    def _error_message(self, response: httpx.Response) -> str:
        try:
            message = response.json().get("message")
        except (ValueError, AttributeError):
            message = None
        return message or f"HTTP {response.status_code}"
