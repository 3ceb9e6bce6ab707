"""On-disk cache keyed by store item id."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from urllib.parse import unquote, urlparse

from steamscrape.errors import ErrorKind, ScrapeError

logger = logging.getLogger(__name__)

PAGE_FILENAME = "index.html"


def filename_from_url(url: str) -> str:
    """Return the last path segment of *url*, used as the cached filename."""
    try:
        parsed = urlparse(url)
    except ValueError as exc:
        raise ScrapeError(ErrorKind.LOCATOR, f"Invalid URL: {url!r}", cause=exc) from exc
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ScrapeError(ErrorKind.LOCATOR, f"Invalid URL: {url!r}")
    name = unquote(parsed.path.rsplit("/", 1)[-1])
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise ScrapeError(ErrorKind.LOCATOR, f"URL has no usable filename: {url!r}")
    return name


class CacheStore:
    """Map remote resources to files below ``root/<app_id>/``."""

    def __init__(self, root: str | Path = "cache") -> None:
        self.root = Path(root)

    def item_dir(self, app_id: int) -> Path:
        return self.root / str(app_id)

    def page_path(self, app_id: int) -> Path:
        return self.item_dir(app_id) / PAGE_FILENAME

    def image_path(self, app_id: int, url: str) -> Path:
        return self.item_dir(app_id) / filename_from_url(url)

    def read(self, path: Path) -> bytes | None:
        """Return cached bytes, or ``None`` on a miss or unreadable file."""
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Couldn't read cached file %s: %s", path, exc)
            return None

    def store(self, path: Path, data: bytes) -> bool:
        """Atomically write *data* to *path*; failures are logged, never raised."""
        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".part")
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as exc:
            error = ScrapeError(ErrorKind.PERSIST, f"Couldn't write {path} to cache", cause=exc)
            logger.warning("%s", error)
            return False
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug("Couldn't remove temporary file %s", tmp_name)
        return True
