# src/toyclaw/commands/status.py
"""Status command - describe the compliance index on disk."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

from toyclaw.commands.base import StatusResult
from toyclaw.config import ConfigError, get_toyclaw_config
from toyclaw.errors import ComplianceError
from toyclaw.index import read_index


def status(
    index_dir: str | None = None,
    config_path: str | Path | None = None,
) -> StatusResult:
    """Read the index manifest and per-market chunk counts.

    No provider call is made.

    Args:
        index_dir: Override index directory
        config_path: Override config file path

    Returns:
        StatusResult describing the index
    """
    config = get_toyclaw_config(index_dir=index_dir, config_path=config_path)
    if isinstance(config, ConfigError):
        return StatusResult(success=False, error=config.message)

    try:
        index = read_index(config.index_dir)
    except ComplianceError as e:
        return StatusResult(success=False, index_dir=config.index_dir, error=e.message)

    manifest = index.manifest
    return StatusResult(
        success=True,
        index_dir=config.index_dir,
        format=index.format.value,
        version=manifest.version if manifest else None,
        created_at=manifest.created_at if manifest else None,
        doc_count=len({chunk.source for chunk in index.chunks}),
        chunk_count=len(index.chunks),
        embedding_dim=index.dim,
        chunks_by_market=dict(sorted(Counter(c.market for c in index.chunks).items())),
    )
