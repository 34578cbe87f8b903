"""DownloadArtifact — one file fetched during a winget bootstrap."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class DownloadArtifact(BaseModel):
    """Source URL and local destination of a bootstrap download."""

    model_config = ConfigDict(frozen=True)

    url: str
    local_path: Path
