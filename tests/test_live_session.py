import pytest
from bs4 import BeautifulSoup

from scraper.sources.live_page import (
    CURRENT_KEYS_JS,
    INSERT_JS,
    KEY_ATTRIBUTE,
    OBSERVER_JS,
    REPORT_BINDING,
    SORT_BINDING,
    SORT_BUTTON_JS,
    LivePackageSession,
)


class FakePage:
    """Nimmt auf, was die Session in die Seite schicken würde."""

    def __init__(self, keys=None):
        self.bindings = {}
        self.styles = []
        self.calls = []
        self.keys = keys or []

    async def expose_function(self, name, fn):
        self.bindings[name] = fn

    async def add_style_tag(self, content=None):
        self.styles.append(content)

    async def evaluate(self, script, arg=None):
        self.calls.append((script, arg))
        if script == CURRENT_KEYS_JS:
            return list(self.keys)
        return 0

    def calls_of(self, script):
        return [arg for s, arg in self.calls if s == script]


def _box_html(packages_html, box_id):
    soup = BeautifulSoup(packages_html, "html.parser")
    return str(soup.find(id=box_id))


async def _report_all(session, packages_html):
    for key, box_id in (("1", "p1"), ("2", "p2"), ("3", "p3"), ("4", "p4")):
        await session._on_package(key, _box_html(packages_html, box_id))


@pytest.mark.asyncio
async def test_attach_registers_bindings():
    page = FakePage()
    session = LivePackageSession(page, logger=lambda _m: None)
    await session.attach()

    assert page.bindings[REPORT_BINDING] == session._on_package
    assert page.bindings[SORT_BINDING] == session.order_keys


@pytest.mark.asyncio
async def test_start_injects_style_observer_and_button_once():
    page = FakePage()
    session = LivePackageSession(page, logger=lambda _m: None)

    await session.start()
    assert await session.start() == 0

    assert len(page.styles) == 1
    assert ".price-per-gb-extension" in page.styles[0]
    assert len(page.calls_of(OBSERVER_JS)) == 1
    assert page.calls_of(SORT_BUTTON_JS)[0][0] == "price-per-gb-sort"


@pytest.mark.asyncio
async def test_reported_box_gets_fragment_pushed(packages_html):
    page = FakePage()
    session = LivePackageSession(page, logger=lambda _m: None)

    assert await session._on_package("1", _box_html(packages_html, "p1")) is True

    inserts = page.calls_of(INSERT_JS)
    assert len(inserts) == 1
    key, html, cls, attr, metric, template_sel, buy_sel = inserts[0]
    assert key == "1"
    assert cls == "price-per-gb-extension"
    assert 'class="price-per-gb-extension"' in html
    assert "30,000" in html
    assert attr == "data-price-per-gb"
    assert metric == "30000.0"
    assert (template_sel, buy_sel) == (".card-template", ".card-buy-credit")


@pytest.mark.asyncio
async def test_same_key_reported_twice_is_augmented_once(packages_html):
    page = FakePage()
    session = LivePackageSession(page, logger=lambda _m: None)
    html = _box_html(packages_html, "p3")

    await session._on_package("7", html)
    await session._on_package("7", html)

    assert len(page.calls_of(INSERT_JS)) == 1
    assert len(session.packages) == 1
    assert session.packages["7"][KEY_ATTRIBUTE] == "7"
    assert session.processor.table.get(session.packages["7"]) == 20000.0


@pytest.mark.asyncio
async def test_unusable_box_is_kept_but_not_pushed(packages_html):
    page = FakePage()
    session = LivePackageSession(page, logger=lambda _m: None)

    assert await session._on_package("2", _box_html(packages_html, "p2")) is True
    assert await session._on_package("x", "") is False

    assert page.calls_of(INSERT_JS) == []
    rows = session.results()
    assert len(rows) == 1
    assert rows[0].skipped_reason == "missing_price_or_size"


@pytest.mark.asyncio
async def test_order_keys_puts_unknown_keys_last(packages_html):
    session = LivePackageSession(FakePage(), logger=lambda _m: None)
    await _report_all(session, packages_html)

    assert session.order_keys(["1", "2", "9", "3", "4"]) == ["3", "1", "4", "2", "9"]
    assert session.order_keys([]) == []


@pytest.mark.asyncio
async def test_sort_applies_order_in_page(packages_html):
    page = FakePage(keys=["1", "2", "3", "4"])
    session = LivePackageSession(page, logger=lambda _m: None)
    await _report_all(session, packages_html)

    ordered = await session.sort()

    assert ordered == ["3", "1", "4", "2"]
    script, arg = page.calls[-1]
    assert "__ppgbApplyOrder" in script
    assert arg == ordered
