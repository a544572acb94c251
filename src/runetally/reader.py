from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Iterable

from .aggregate import aggregate
from .config import ReaderConfig
from .sources import SaveSource, sources_from_paths
from .summary import RunesSummary
from .tables import ensure_constant_data

logger = logging.getLogger(__name__)

SubmitCallback = Callable[[RunesSummary], None]


class SaveReader:
    """Collects a selection of save files and reports one summary per submission.

    The selection is cleared after every submission so the same files can be
    selected and submitted again.
    """

    def __init__(self, on_submit: SubmitCallback, *, config: ReaderConfig | None = None) -> None:
        self.on_submit = on_submit
        self.config = config if config is not None else ReaderConfig()
        self._selection: tuple[SaveSource, ...] = ()
        self._generation = 0
        ensure_constant_data()

    @property
    def selection(self) -> tuple[SaveSource, ...]:
        return self._selection

    @property
    def selection_generation(self) -> int:
        return self._generation

    def select(self, paths: Iterable[Path | str]) -> tuple[SaveSource, ...]:
        sources = sources_from_paths((Path(p) for p in paths), recursive=self.config.recursive)
        return self.select_sources(sources)

    def select_sources(self, sources: Iterable[SaveSource]) -> tuple[SaveSource, ...]:
        self._selection = tuple(sources)
        return self._selection

    def reset(self) -> None:
        self._selection = ()
        self._generation += 1

    async def submit_async(self, sources: Iterable[SaveSource] | None = None) -> RunesSummary | None:
        batch = tuple(sources) if sources is not None else self._selection
        if not batch:
            logger.debug("nothing selected, ignoring submit")
            return None
        self.reset()
        summary = await aggregate(batch, config=self.config)
        self.on_submit(summary)
        return summary

    def submit(self, sources: Iterable[SaveSource] | None = None) -> RunesSummary | None:
        return asyncio.run(self.submit_async(sources))
