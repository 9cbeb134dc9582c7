"""
Revisioned file stores.

A store reads and writes text at a path in a remote, versioned namespace.
Every file carries an opaque revision tag; writes are compare-and-swap
against the revision the writer last observed.

    read(path)                  -> StoredFile or None (not found)
    write(path, content, msg)   -> new revision
    list_dir(path)              -> entries, empty if the path is absent

Backends:
    GitHubContentStore  GitHub repository contents API, one commit per write
    InMemoryStore       dict-backed, same revision semantics

Writes are single-shot: a conflict is raised to the caller, never retried
here.
"""

import base64
import hashlib
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx

from quicksurvey.config import StoreConfig

logger = logging.getLogger(__name__)

GITHUB_API_VERSION = "2022-11-28"


class StoreError(Exception):
    """Base class for store failures."""
    pass


class RemoteRequestError(StoreError):
    """Raised on transport failure or a non-2xx response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ConflictError(RemoteRequestError):
    """
    Raised when a write's revision no longer matches the remote.

    Retryable: re-read the file and write again.
    """
    pass


@dataclass
class StoredFile:
    content: str
    revision: str


@dataclass
class DirectoryEntry:
    name: str
    type: str  # "file" or "dir"


class RevisionedStore:
    """Abstract store interface"""

    def read(self, path: str) -> Optional[StoredFile]:
        """Return current content and revision, or None if absent"""
        raise NotImplementedError

    def list_dir(self, path: str) -> List[DirectoryEntry]:
        """List entries directly under path"""
        raise NotImplementedError

    def _put(self, path: str, content: str, message: str, revision: Optional[str]) -> str:
        """Submit content against an expected revision, return the new one"""
        raise NotImplementedError

    def revision(self, path: str) -> Optional[str]:
        stored = self.read(path)
        return stored.revision if stored else None

    def write(self, path: str, content: str, message: str) -> str:
        """
        Read-then-write: fetch the current revision (None if the file does
        not exist yet), then submit the new content against it.

        Raises:
            ConflictError: the remote changed between the read and the put
            RemoteRequestError: any other remote failure
        """
        revision = self.revision(path)
        new_revision = self._put(path, content, message, revision)
        logger.info("Committed %s (%s -> %s): %s", path, revision, new_revision, message)
        return new_revision

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class GitHubContentStore(RevisionedStore):
    """GitHub repository contents API storage backend"""

    def __init__(self, config: StoreConfig, transport: Optional[httpx.BaseTransport] = None):
        config.validate()
        self.config = config
        self._client = httpx.Client(
            base_url=config.api_url,
            timeout=config.timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {config.token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
        )

    def _repo_url(self) -> str:
        return f"/repos/{quote(self.config.owner)}/{quote(self.config.repo)}"

    def _contents_url(self, path: str) -> str:
        return f"{self._repo_url()}/contents/{quote(path.strip('/'), safe='/')}"

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteRequestError(f"{method} {url} failed: {e}") from e

    @staticmethod
    def _json(response: httpx.Response, what: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise RemoteRequestError(
                f"{what} returned a body that is not JSON: {e}",
                status_code=response.status_code,
            ) from e

    def _get(self, path: str) -> Any:
        """GET contents JSON, or None on 404"""
        logger.debug("GET %s@%s", path, self.config.branch)
        response = self._request("GET", self._contents_url(path), params={"ref": self.config.branch})
        if response.status_code == 404:
            return None
        if not response.is_success:
            raise RemoteRequestError(
                f"GET {path} returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        return self._json(response, f"GET {path}")

    def _get_blob(self, path: str, sha: str) -> Dict[str, Any]:
        """Files over 1 MB come back from the contents API without content"""
        logger.debug("GET blob %s for %s", sha, path)
        response = self._request("GET", f"{self._repo_url()}/git/blobs/{quote(sha)}")
        if not response.is_success:
            raise RemoteRequestError(
                f"GET blob {sha} for {path} returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        return self._json(response, f"GET blob {sha}")

    def read(self, path: str) -> Optional[StoredFile]:
        data = self._get(path)
        if data is None:
            return None
        if not isinstance(data, dict) or data.get("type") != "file":
            # Directory or symlink at this path, not a file we can use
            return None

        sha = data["sha"]
        if data.get("encoding", "base64") != "base64":
            data = self._get_blob(path, sha)
            if data.get("encoding") != "base64":
                raise RemoteRequestError(f"{path} has unsupported encoding {data.get('encoding')!r}")

        try:
            raw = base64.b64decode(data.get("content") or "")
            content = raw.decode("utf-8")
        except (ValueError, UnicodeDecodeError) as e:
            raise RemoteRequestError(f"{path} content is not UTF-8 text: {e}") from e
        return StoredFile(content=content, revision=sha)

    def list_dir(self, path: str) -> List[DirectoryEntry]:
        data = self._get(path)
        if not isinstance(data, list):
            return []
        return [DirectoryEntry(name=item["name"], type=item["type"]) for item in data]

    def _put(self, path: str, content: str, message: str, revision: Optional[str]) -> str:
        body: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": self.config.branch,
        }
        if revision:
            body["sha"] = revision

        response = self._request("PUT", self._contents_url(path), json=body)
        if response.status_code in (409, 422):
            raise ConflictError(
                f"PUT {path} rejected, revision {revision} is stale: {response.text}",
                status_code=response.status_code,
            )
        if not response.is_success:
            raise RemoteRequestError(
                f"PUT {path} returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        return self._json(response, f"PUT {path}")["content"]["sha"]

    def close(self) -> None:
        self._client.close()


class InMemoryStore(RevisionedStore):
    """Dict-backed store with the same compare-and-swap semantics"""

    def __init__(self, files: Optional[Dict[str, str]] = None):
        self._files: Dict[str, StoredFile] = {}
        self._lock = threading.Lock()
        self._counter = 0
        self.commits: List[Tuple[str, str]] = []
        for path, content in (files or {}).items():
            self._files[self._normalize(path)] = StoredFile(content, self._next_revision(content))

    @staticmethod
    def _normalize(path: str) -> str:
        return path.strip("/")

    def _next_revision(self, content: str) -> str:
        self._counter += 1
        return hashlib.sha1(f"{self._counter}:{content}".encode("utf-8")).hexdigest()

    def read(self, path: str) -> Optional[StoredFile]:
        with self._lock:
            return self._files.get(self._normalize(path))

    def list_dir(self, path: str) -> List[DirectoryEntry]:
        prefix = self._normalize(path)
        if prefix:
            prefix += "/"
        entries: Dict[str, str] = {}
        with self._lock:
            for file_path in self._files:
                if not file_path.startswith(prefix):
                    continue
                name, _, rest = file_path[len(prefix):].partition("/")
                entries[name] = "dir" if rest else "file"
        return [DirectoryEntry(name=name, type=kind) for name, kind in sorted(entries.items())]

    def _put(self, path: str, content: str, message: str, revision: Optional[str]) -> str:
        path = self._normalize(path)
        with self._lock:
            current = self._files.get(path)
            current_revision = current.revision if current else None
            if current_revision != revision:
                raise ConflictError(
                    f"PUT {path} rejected, expected {revision} but remote is at {current_revision}",
                    status_code=409,
                )
            stored = StoredFile(content, self._next_revision(content))
            self._files[path] = stored
            self.commits.append((path, message))
            return stored.revision
