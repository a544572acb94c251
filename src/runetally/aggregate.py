from __future__ import annotations

import asyncio
import functools
import logging
from typing import Iterable

from .config import ReaderConfig
from .parser import parse_source
from .sources import SaveSource
from .summary import FileOutcome, RunesSummary
from .tables import ensure_constant_data

logger = logging.getLogger(__name__)


def merge_outcomes(outcomes: Iterable[FileOutcome | RunesSummary]) -> RunesSummary:
    return functools.reduce(RunesSummary.merge, outcomes, RunesSummary.empty())


async def _parse_bounded(
    source: SaveSource,
    *,
    semaphore: asyncio.Semaphore | None,
    timeout: float | None,
) -> FileOutcome:
    if semaphore is None:
        return await parse_source(source, timeout=timeout)
    async with semaphore:
        return await parse_source(source, timeout=timeout)


async def aggregate(sources: Iterable[SaveSource], *, config: ReaderConfig | None = None) -> RunesSummary:
    """Parse every source concurrently and fold the outcomes into one summary.

    Returns only once every file has finished. Outcomes are folded in
    completion order, so `read_files`/`read_errors` order is not stable
    between runs; the tally is.
    """

    cfg = config if config is not None else ReaderConfig()
    ensure_constant_data()
    batch = list(sources)
    if not batch:
        return RunesSummary.empty()

    semaphore = asyncio.Semaphore(int(cfg.max_concurrency)) if cfg.max_concurrency is not None else None
    tasks = [
        asyncio.ensure_future(_parse_bounded(source, semaphore=semaphore, timeout=cfg.file_timeout))
        for source in batch
    ]
    outcomes = [await task for task in asyncio.as_completed(tasks)]
    summary = merge_outcomes(outcomes)
    logger.info(
        "read %d of %d files, %d errors, %d runes",
        len(summary.read_files),
        len(batch),
        len(summary.read_errors),
        summary.total,
    )
    return summary


def aggregate_sync(sources: Iterable[SaveSource], *, config: ReaderConfig | None = None) -> RunesSummary:
    return asyncio.run(aggregate(sources, config=config))
