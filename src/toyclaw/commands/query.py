# src/toyclaw/commands/query.py
"""Query command - retrieval smoke test against the compliance index."""

from __future__ import annotations

import asyncio
import time
from pathlib import Path

from toyclaw.commands.base import QueryResult, SearchResult
from toyclaw.config import ConfigError, get_toyclaw
from toyclaw.errors import ComplianceError
from toyclaw.markets import TargetMarket


def query(
    text: str,
    market: str,
    top_k: int | None = None,
    index_dir: str | None = None,
    config_path: str | Path | None = None,
) -> QueryResult:
    """Retrieve the chunks most similar to text within a market.

    Args:
        text: Query text
        market: Target market key (e.g. "EUROPE")
        top_k: Number of results (None for the configured default)
        index_dir: Override index directory
        config_path: Override config file path

    Returns:
        QueryResult with hits and load/retrieval timings
    """
    try:
        target = TargetMarket(market.upper())
    except ValueError:
        allowed = ", ".join(m.value for m in TargetMarket)
        return QueryResult(
            success=False,
            query=text,
            market=market,
            error=f"Unknown market '{market}'. Choose one of: {allowed}",
        )

    app = get_toyclaw(index_dir=index_dir, config_path=config_path)
    if isinstance(app, ConfigError):
        return QueryResult(success=False, query=text, market=target.value, error=app.message)

    retriever = app.retriever()
    try:
        started = time.perf_counter()
        retriever.load()
        loaded = time.perf_counter()
        hits = asyncio.run(retriever.retrieve(text, target, top_k=top_k))
        finished = time.perf_counter()
    except ComplianceError as e:
        return QueryResult(success=False, query=text, market=target.value, error=e.message)

    return QueryResult(
        success=True,
        query=text,
        market=target.value,
        results=[
            SearchResult(
                chunk_id=hit.id,
                source=hit.source,
                market=hit.market,
                section=hit.section,
                content=hit.text,
                score=hit.score,
            )
            for hit in hits
        ],
        load_seconds=loaded - started,
        retrieval_seconds=finished - loaded,
    )
