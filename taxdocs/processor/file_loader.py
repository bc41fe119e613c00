from pathlib import Path

import httpx

from taxdocs.processor.exceptions import FileFetchError, FileReadError

_REMOTE_PREFIXES = ("http://", "https://")


def resolve_local_path(uploads_root: Path, location: str) -> Path:
    """Absolute paths are used as-is; relative ones live under uploads_root."""
    path = Path(location)
    return path if path.is_absolute() else uploads_root / path


class FileLoader:
    """Reads document bytes from a remote URL or a local path."""

    UPLOADS_ROOT = Path("/app/uploads/documents")

    def __init__(
        self,
        uploads_root: Path | None = None,
        http_client: httpx.Client | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._uploads_root = uploads_root if uploads_root is not None else self.UPLOADS_ROOT
        self._http_client = http_client
        self._timeout_seconds = timeout_seconds

    def load(self, location: str) -> bytes:
        """Read document bytes, always fresh.

        Raises:
            FileFetchError: if a remote location answers with a non-success status.
            FileReadError: if the file cannot be fetched or read.
        """
        if location.lower().startswith(_REMOTE_PREFIXES):
            return self._fetch(location)
        return self._read(location)

    def _fetch(self, url: str) -> bytes:
        try:
            if self._http_client is not None:
                response = self._http_client.get(url, follow_redirects=True)
            else:
                with httpx.Client(timeout=self._timeout_seconds) as client:
                    response = client.get(url, follow_redirects=True)
        except httpx.HTTPError as exc:
            raise FileReadError(f"Failed to fetch file: {exc}") from exc

        if not response.is_success:
            raise FileFetchError(
                f"Failed to fetch file: {response.status_code} {response.reason_phrase}"
            )
        return response.content

    def _read(self, location: str) -> bytes:
        path = resolve_local_path(self._uploads_root, location)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FileReadError(f"Failed to read file {path}: {exc}") from exc
