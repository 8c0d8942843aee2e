# scraper/sources/package_watcher.py

import asyncio
from typing import Callable, Iterable, List, Optional

from bs4 import BeautifulSoup, Tag

from .package_page import AugmentCallback, Logger, PackageProcessor, _log


class PackageWatcher:
    """
    Abo auf neu eingefügte Knoten – das Python-Gegenstück zum MutationObserver.

    Wer Knoten beobachtet (Playwright-Binding, Test-Harness, Queue), ruft
    feed() mit den neu aufgetauchten Knoten auf. Jeder Knoten, der selbst eine
    Paket-Box ist oder Paket-Boxen enthält, läuft durch process().
    """

    def __init__(
        self,
        processor: PackageProcessor,
        container_selector: Optional[str] = None,
        logger: Optional[Logger] = None,
    ):
        self.processor = processor
        self.container_selector = container_selector or processor.config.selectors.container
        self.logger = logger

    def subscribe(self, callback: AugmentCallback) -> Callable[[], None]:
        return self.processor.subscribe(callback)

    def _candidates(self, node: Tag) -> List[Tag]:
        if isinstance(node, BeautifulSoup):
            return node.select(self.container_selector)
        if node.css.match(self.container_selector):
            return [node]
        return node.select(self.container_selector)

    def start(self, root: Tag) -> List[Tag]:
        """Erster Durchlauf über alles, was schon da ist."""
        return self._run(root.select(self.container_selector))

    def feed(self, nodes: Iterable[object]) -> List[Tag]:
        boxes: List[Tag] = []
        for node in nodes:
            # Text-/Kommentar-Knoten ignorieren (nodeType !== 1)
            if not isinstance(node, Tag):
                continue
            boxes.extend(self._candidates(node))
        return self._run(boxes)

    def _run(self, boxes: List[Tag]) -> List[Tag]:
        augmented: List[Tag] = []
        for box in boxes:
            if self.processor.has_augmentation(box):
                continue
            if self.processor.process(box) is not None:
                augmented.append(box)
        if augmented:
            _log(self.logger, f"🆕 {len(augmented)} new package(s) augmented")
        return augmented

    async def consume(self, queue: "asyncio.Queue") -> int:
        """
        Liest Knoten-Batches aus einer Queue, bis None kommt.
        Gibt die Zahl der augmentierten Boxen zurück.
        """
        total = 0
        while True:
            batch = await queue.get()
            try:
                if batch is None:
                    return total
                total += len(self.feed(batch))
            finally:
                queue.task_done()
