# src/toyclaw/commands/build_index.py
"""Build-index command - turn the documents tree into a compliance index."""

from __future__ import annotations

from pathlib import Path

from toyclaw.commands.base import (
    BuildIndexResult,
    CommandStage,
    DocumentResult,
    ProgressCallback,
    ProgressUpdate,
)
from toyclaw.config import (
    ConfigError,
    check_embedding_credentials,
    create_toyclaw,
    get_toyclaw_config,
)
from toyclaw.errors import ComplianceError

# Map builder stage names to CommandStage
STAGE_MAP = {
    "discovering": CommandStage.DISCOVERING,
    "chunking": CommandStage.CHUNKING,
    "embedding": CommandStage.EMBEDDING,
    "writing": CommandStage.WRITING,
}


def build_index(
    docs_dir: str | Path | None = None,
    output_dir: str | Path | None = None,
    config_path: str | Path | None = None,
    on_progress: ProgressCallback | None = None,
) -> BuildIndexResult:
    """Build the compliance index.

    Args:
        docs_dir: Documents directory (default from config)
        output_dir: Index directory (default from config)
        config_path: Override config file path
        on_progress: Callback for progress updates

    Returns:
        BuildIndexResult with per-document counts
    """
    config = get_toyclaw_config(
        index_dir=str(output_dir) if output_dir else None,
        docs_dir=str(docs_dir) if docs_dir else None,
        config_path=config_path,
    )
    if isinstance(config, ConfigError):
        return BuildIndexResult(success=False, error=config.message)

    if not Path(config.docs_dir).is_dir():
        return BuildIndexResult(
            success=False,
            docs_dir=config.docs_dir,
            index_dir=config.index_dir,
            error=(
                f"Documents directory not found: {config.docs_dir}. "
                "Place compliance PDF files there and try again."
            ),
        )

    credentials_error = check_embedding_credentials(config)
    if credentials_error is not None:
        error = credentials_error.message
        if credentials_error.suggestion:
            error = f"{error} {credentials_error.suggestion}"
        return BuildIndexResult(
            success=False, docs_dir=config.docs_dir, index_dir=config.index_dir, error=error
        )

    try:
        app = create_toyclaw(config)
    except Exception as e:
        return BuildIndexResult(success=False, error=f"Failed to create toyclaw: {e}")

    def forward(stage: str, current: int, total: int, message: str) -> None:
        if on_progress:
            on_progress(
                ProgressUpdate(
                    stage=STAGE_MAP.get(stage, CommandStage.LOADING),
                    current=current,
                    total=total,
                    message=message,
                )
            )

    try:
        build = app.build_index(config.docs_dir, on_progress=forward)
    except ComplianceError as e:
        return BuildIndexResult(
            success=False,
            docs_dir=config.docs_dir,
            index_dir=config.index_dir,
            error=f"Index build aborted: {e.message}",
        )
    except (OSError, ValueError) as e:
        return BuildIndexResult(
            success=False,
            docs_dir=config.docs_dir,
            index_dir=config.index_dir,
            error=str(e),
        )

    documents = []
    for key, count in build.chunk_counts.items():
        market, _, filename = key.partition("/")
        documents.append(DocumentResult(filename=filename, market=market, chunks=count))
    for skipped in build.skipped:
        documents.append(
            DocumentResult(
                filename=skipped.filename,
                market=skipped.market,
                skipped=True,
                reason=skipped.reason,
            )
        )

    if on_progress:
        on_progress(ProgressUpdate(stage=CommandStage.COMPLETE, current=1, total=1))

    return BuildIndexResult(
        success=True,
        docs_dir=config.docs_dir,
        index_dir=config.index_dir,
        documents=documents,
        missing_folders=build.missing_folders,
        doc_count=build.manifest.doc_count,
        total_chunks=build.total_chunks,
        embedding_dim=build.embedding_dim,
    )
