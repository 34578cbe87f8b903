"""
L4 Execution — Artifact download and release-index lookup.

Plain ``urllib`` downloads for the winget bootstrap.  Every failure is
raised as ``DownloadFailure`` so the bootstrapper can stop at the
first broken stage.
"""

from __future__ import annotations

import json
import logging
import re
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any

from provisioner.core.errors import DownloadFailure
from provisioner.core.models.artifact import DownloadArtifact

logger = logging.getLogger(__name__)

_USER_AGENT = "machine-provisioner/1.0"


def _fmt_size(n: int | float) -> str:
    """Format byte count to human-readable string."""
    for unit in ("B", "KB", "MB", "GB"):
        if n < 1024:
            return f"{n:.1f} {unit}"
        n /= 1024
    return f"{n:.1f} TB"


def download_file(artifact: DownloadArtifact, *, timeout: int = 60) -> int:
    """Fetch ``artifact.url`` into ``artifact.local_path``.

    Returns:
        Number of bytes written.

    Raises:
        DownloadFailure: On any network, HTTP, or filesystem error.
            A partially written file is removed.
    """
    dest = artifact.local_path
    dest.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Downloading %s", artifact.url)

    req = urllib.request.Request(artifact.url, headers={"User-Agent": _USER_AGENT})
    downloaded = 0
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp, open(dest, "wb") as f:
            while True:
                chunk = resp.read(8192)
                if not chunk:
                    break
                f.write(chunk)
                downloaded += len(chunk)
    except (urllib.error.URLError, OSError, ValueError) as e:
        dest.unlink(missing_ok=True)
        raise DownloadFailure(artifact.url, str(e)) from e

    if downloaded == 0:
        dest.unlink(missing_ok=True)
        raise DownloadFailure(artifact.url, "empty response")

    logger.info("Downloaded %s to %s", _fmt_size(downloaded), dest)
    return downloaded


def fetch_release_index(index_url: str, *, timeout: int = 15) -> list[dict[str, Any]]:
    """Fetch a GitHub releases listing (newest first)."""
    req = urllib.request.Request(
        index_url,
        headers={
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": _USER_AGENT,
        },
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            data = json.loads(resp.read())
    except (urllib.error.URLError, OSError, ValueError) as e:
        raise DownloadFailure(index_url, f"cannot fetch release index: {e}") from e

    if not isinstance(data, list):
        raise DownloadFailure(index_url, "release index is not a list")
    return data


def select_release_asset(releases: list[dict[str, Any]], pattern: str) -> str | None:
    """Pick the download URL of the first asset matching ``pattern``.

    The first non-prerelease release with a matching asset wins.  If
    no stable release has one, the newest release's matching asset is
    used instead.
    """
    regex = re.compile(pattern)

    def _match(release: dict[str, Any]) -> str | None:
        for asset in release.get("assets", []):
            if regex.search(asset.get("name", "")):
                return asset.get("browser_download_url")
        return None

    for release in releases:
        if release.get("prerelease") or release.get("draft"):
            continue
        url = _match(release)
        if url:
            return url

    if releases:
        return _match(releases[0])
    return None


def resolve_license_url(index_url: str, pattern: str) -> str:
    """Discover the signed license URL from the release index.

    Raises:
        DownloadFailure: If the index cannot be read or nothing matches.
    """
    releases = fetch_release_index(index_url)
    url = select_release_asset(releases, pattern)
    if not url:
        raise DownloadFailure(index_url, f"no release asset matching '{pattern}'")
    logger.debug("License asset resolved to %s", url)
    return url
