"""Content sources: fetch stack artifacts over HTTPS or from a local mirror."""

import logging
from pathlib import Path

import httpx

from evdeploy.errors import ArtifactFetchError

logger = logging.getLogger(__name__)

DEFAULT_ARTIFACT_BASE_URL = "https://raw.githubusercontent.com/rollkit/ops-toolbox/refs/heads/main/ev-stacks"
DEFAULT_FETCH_TIMEOUT = 30.0


class HttpContentSource:
    """Fetch artifacts by relative path under a versioned base URL.

    TLS is always verified and no authentication is sent.
    """

    def __init__(self, base_url, timeout=DEFAULT_FETCH_TIMEOUT, client: httpx.Client | None = None):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    def fetch(self, path: str) -> bytes:
        url = self.url_for(path)
        try:
            resp = self._client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ArtifactFetchError(path, url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ArtifactFetchError(path, url, str(e) or type(e).__name__) from e
        return resp.content

    def close(self):
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __str__(self):
        return self.base_url


class LocalContentSource:
    """Read artifacts from a local mirror laid out like the remote store."""

    def __init__(self, root):
        self.root = Path(root)

    def fetch(self, path: str) -> bytes:
        full_path = self.root / path
        try:
            return full_path.read_bytes()
        except OSError as e:
            raise ArtifactFetchError(path, str(self.root), e.strerror or str(e)) from e

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __str__(self):
        return str(self.root)


def open_content_source(location=DEFAULT_ARTIFACT_BASE_URL, timeout=DEFAULT_FETCH_TIMEOUT):
    """Build a content source from an https:// URL or a local directory path.

    Raises:
        ValueError: for plain http:// URLs.
    """
    if location.startswith("https://"):
        return HttpContentSource(location, timeout=timeout)
    if location.startswith("http://"):
        raise ValueError(f"Refusing to fetch artifacts over plain HTTP: {location}")
    if location.startswith("file://"):
        location = location[len("file://"):]
    logger.debug(f"Using local artifact mirror {location}")
    return LocalContentSource(Path(location).expanduser())
