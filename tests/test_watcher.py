import asyncio

import pytest
from bs4 import BeautifulSoup

from scraper.sources.package_watcher import PackageWatcher

NEW_BOX = """
<div class="card-templ-wrapper" id="{id}">
  <div class="card-template">
    <div class="card-description"><h6>{size}</h6></div>
    <div class="card-price"><span class="fa-number">{price}</span> تومان</div>
  </div>
</div>
"""


def _insert(page, html):
    """Simuliert ein nachgeladenes Element: ins Grid hängen und zurückgeben."""
    node = BeautifulSoup(html, "html.parser").find(True)
    page.soup.select_one(".grid").append(node)
    return node


def test_start_processes_existing_boxes(page):
    watcher = PackageWatcher(page.processor, logger=lambda _m: None)
    augmented = watcher.start(page.soup)

    assert [el["id"] for el in augmented] == ["p1", "p3", "p4"]


def test_feed_processes_inserted_box(page):
    watcher = PackageWatcher(page.processor, logger=lambda _m: None)
    watcher.start(page.soup)

    node = _insert(page, NEW_BOX.format(id="n1", size="۵ گیگ", price="۵۰,۰۰۰"))
    augmented = watcher.feed([node])

    assert augmented == [node]
    assert page.table.get(node) == 10000.0
    assert len(node.select(".price-per-gb-extension")) == 1


def test_feed_finds_boxes_inside_wrapper(page):
    watcher = PackageWatcher(page.processor, logger=lambda _m: None)
    wrapper_html = (
        "<section>"
        + NEW_BOX.format(id="w1", size="1 GB", price="1000")
        + NEW_BOX.format(id="w2", size="2 GB", price="1000")
        + "</section>"
    )
    wrapper = _insert(page, wrapper_html)

    augmented = watcher.feed([wrapper])
    assert [el["id"] for el in augmented] == ["w1", "w2"]


def test_feed_same_node_twice_does_nothing_the_second_time(page):
    watcher = PackageWatcher(page.processor, logger=lambda _m: None)
    node = _insert(page, NEW_BOX.format(id="n2", size="3 GB", price="3000"))

    assert watcher.feed([node]) == [node]
    assert watcher.feed([node]) == []
    assert len(node.select(".price-per-gb-extension")) == 1


def test_feed_ignores_text_nodes_and_unrelated_elements(page):
    watcher = PackageWatcher(page.processor, logger=lambda _m: None)
    soup = BeautifulSoup("<p>hallo</p>text", "html.parser")

    assert watcher.feed([soup.p, soup.contents[-1], None]) == []


def test_subscribers_see_new_packages(page):
    watcher = PackageWatcher(page.processor, logger=lambda _m: None)
    seen = []
    watcher.subscribe(lambda el, metric: seen.append((el.get("id"), metric)))

    watcher.start(page.soup)
    assert seen == [("p1", 30000.0), ("p3", 20000.0), ("p4", 100000.0)]


def test_newly_inserted_box_stays_unsorted_until_next_sort(page):
    watcher = PackageWatcher(page.processor, logger=lambda _m: None)
    watcher.start(page.soup)
    page.sort_packages()

    cheap = _insert(page, NEW_BOX.format(id="cheap", size="100 GB", price="1000"))
    watcher.feed([cheap])
    assert [el["id"] for el in page.packages()][-1] == "cheap"

    page.sort_packages()
    assert [el["id"] for el in page.packages()][0] == "cheap"


@pytest.mark.asyncio
async def test_consume_reads_batches_until_sentinel(page):
    watcher = PackageWatcher(page.processor, logger=lambda _m: None)
    queue = asyncio.Queue()

    first = _insert(page, NEW_BOX.format(id="q1", size="1 GB", price="100"))
    second = _insert(page, NEW_BOX.format(id="q2", size="1 GB", price="200"))
    await queue.put([first])
    await queue.put([second, first])
    await queue.put(None)

    total = await watcher.consume(queue)
    assert total == 2
    assert page.table.get(second) == 200.0
