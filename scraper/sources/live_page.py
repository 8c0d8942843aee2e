# scraper/sources/live_page.py

import asyncio
from typing import Dict, List, Optional

from bs4 import BeautifulSoup, Tag
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from engine.vocabulary import PipelineConfig
from scraper.errors.exceptions import NetworkError
from scraper.interfaces.models import PackageResult
from scraper.sources.package_page import (
    Logger,
    MetricTable,
    PackageProcessor,
    _log,
    build_style_css,
)
from scraper.sources.package_watcher import PackageWatcher
from scraper.sources.scraper_config import SCRAPER_SETTINGS
from scraper.utils.browser import BrowserFactory

KEY_ATTRIBUTE = "data-ppgb-key"
REPORT_BINDING = "__ppgbReportPackage"
SORT_BINDING = "__ppgbRequestSort"


# ----------------------------------------------------------
# JavaScript, das in die Seite injiziert wird
# ----------------------------------------------------------

# Jede Paket-Box bekommt beim ersten Sichten einen Schlüssel und wird genau
# einmal (als outerHTML) an Python gemeldet – initial und per MutationObserver.
OBSERVER_JS = """
([selector, bindingName]) => {
  if (window.__ppgbObserver) return 0;
  let counter = 0;
  const report = (box) => {
    if (box.dataset.ppgbKey) return;
    box.dataset.ppgbKey = String(++counter);
    window[bindingName](box.dataset.ppgbKey, box.outerHTML);
  };
  const scan = (node) => {
    if (node.nodeType !== 1) return;
    if (node.matches(selector)) { report(node); return; }
    node.querySelectorAll(selector).forEach(report);
  };

  window.__ppgbApplyOrder = (ordered) => {
    const groups = new Map();
    ordered.forEach((key) => {
      const box = document.querySelector(`[data-ppgb-key="${key}"]`);
      if (!box || !box.parentElement) return;
      if (!groups.has(box.parentElement)) groups.set(box.parentElement, []);
      groups.get(box.parentElement).push(box);
    });
    groups.forEach((sorted, parent) => {
      const current = Array.from(parent.children).filter((c) => sorted.includes(c));
      const markers = current.map((box) => {
        const m = document.createComment('ppgb-slot');
        box.replaceWith(m);
        return m;
      });
      markers.forEach((m, i) => m.replaceWith(sorted[i]));
    });
    return ordered.length;
  };

  scan(document.body);
  window.__ppgbObserver = new MutationObserver((mutations) => {
    mutations.forEach((m) => {
      if (m.type === 'childList') m.addedNodes.forEach(scan);
    });
  });
  window.__ppgbObserver.observe(document.body, { childList: true, subtree: true });
  return counter;
}
"""

INSERT_JS = """
([key, html, cls, attr, metric, templateSel, buySel]) => {
  const box = document.querySelector(`[data-ppgb-key="${key}"]`);
  if (!box || box.querySelector('.' + cls)) return false;
  box.setAttribute(attr, metric);
  const holder = document.createElement('div');
  holder.innerHTML = html;
  const fragment = holder.firstElementChild;
  const tpl = box.querySelector(templateSel);
  if (!tpl) { box.appendChild(fragment); return true; }
  const buy = tpl.querySelector(buySel);
  if (buy) buy.parentNode.insertBefore(fragment, buy); else tpl.appendChild(fragment);
  return true;
}
"""

SORT_BUTTON_JS = """
([buttonId, label, bindingName, selector]) => {
  if (document.getElementById(buttonId)) return false;
  const btn = document.createElement('button');
  btn.id = buttonId;
  btn.type = 'button';
  btn.textContent = label;
  btn.style.cssText = 'position:fixed;bottom:16px;left:16px;z-index:9999;padding:8px 14px;'
    + 'border:none;border-radius:8px;background:#007bff;color:#fff;cursor:pointer;font-size:0.9rem;';
  btn.addEventListener('click', async () => {
    const keys = Array.from(document.querySelectorAll(selector))
      .map((b) => b.dataset.ppgbKey)
      .filter(Boolean);
    const ordered = await window[bindingName](keys);
    window.__ppgbApplyOrder(ordered);
  });
  document.body.appendChild(btn);
  return true;
}
"""

CURRENT_KEYS_JS = """
(selector) => Array.from(document.querySelectorAll(selector))
  .map((b) => b.dataset.ppgbKey)
  .filter(Boolean)
"""


def _live_key(element: Tag) -> Optional[str]:
    return element.get(KEY_ATTRIBUTE)


# ----------------------------------------------------------
# Session: eine Live-Seite + eigene Side Table
# ----------------------------------------------------------
class LivePackageSession:
    """
    Verbindet eine Playwright-Seite mit der Python-Pipeline.

    Die Seite meldet jede neue Paket-Box als outerHTML; Python parst sie,
    ruft denselben process() wie für statisches HTML auf und schickt das
    fertige Fragment zurück in die Seite. Die Side Table ist über den
    data-ppgb-key der Box verschlüsselt.
    """

    def __init__(self, page, config: Optional[PipelineConfig] = None, logger: Optional[Logger] = None):
        self.page = page
        self.config = config or PipelineConfig()
        self.logger = logger
        self.processor = PackageProcessor(self.config, table=MetricTable(key=_live_key), logger=logger)
        self.watcher = PackageWatcher(self.processor, logger=logger)
        self.packages: Dict[str, Tag] = {}
        self._started = False

    async def attach(self) -> None:
        """Bindings registrieren – muss vor page.goto() passieren."""
        await self.page.expose_function(REPORT_BINDING, self._on_package)
        await self.page.expose_function(SORT_BINDING, self.order_keys)

    async def start(self) -> int:
        if self._started:
            return 0
        self._started = True

        sel = self.config.selectors
        render = self.config.render

        await self.page.add_style_tag(content=build_style_css(render, sel.container, sel.template))
        seen = await self.page.evaluate(OBSERVER_JS, [sel.container, REPORT_BINDING])
        await self.page.evaluate(
            SORT_BUTTON_JS,
            [render.sort_button_id, render.sort_button_label, SORT_BINDING, sel.container],
        )
        _log(self.logger, f"👀 Observing packages ({seen} already on page)")
        return seen

    async def _on_package(self, key: str, outer_html: str) -> bool:
        node = BeautifulSoup(outer_html or "", "html.parser").find(True)
        if node is None:
            return False
        node[KEY_ATTRIBUTE] = key

        box = self.packages.setdefault(key, node)
        for augmented in self.watcher.feed([box]):
            await self._push(augmented)
        return True

    async def _push(self, box: Tag) -> None:
        render = self.config.render
        sel = self.config.selectors
        fragment = box.select_one(f".{render.fragment_class}")
        metric = self.processor.table.get(box)
        if fragment is None or metric is None:
            return

        await self.page.evaluate(
            INSERT_JS,
            [
                _live_key(box),
                str(fragment),
                render.fragment_class,
                render.metric_attribute,
                str(metric),
                sel.template,
                sel.buy_credit,
            ],
        )

    def order_keys(self, keys: List[str]) -> List[str]:
        """
        Schlüssel in DOM-Reihenfolge rein, sortierte Schlüssel raus.
        Noch nicht gemeldete Boxen haben keine Metrik und landen hinten.
        """
        known = [self.packages[k] for k in keys if k in self.packages]
        unknown = [k for k in keys if k not in self.packages]
        ordered = self.processor.order_by_metric(known)
        return [_live_key(box) for box in ordered] + unknown

    async def sort(self) -> List[str]:
        keys = await self.page.evaluate(CURRENT_KEYS_JS, self.config.selectors.container)
        ordered = self.order_keys(keys)
        await self.page.evaluate("(ordered) => window.__ppgbApplyOrder(ordered)", ordered)
        _log(self.logger, f"↕️ Sorted {len(ordered)} packages by price per GB")
        return ordered

    def results(self) -> List[PackageResult]:
        rows: List[PackageResult] = []
        for idx, box in enumerate(self.packages.values()):
            row = self.processor.evaluate(box, index=idx)
            rows.append(row)
        return rows


# ----------------------------------------------------------
# Workflows
# ----------------------------------------------------------
async def watch_live_page(
    url: str,
    config: Optional[PipelineConfig] = None,
    seconds: float = 30,
    sort: bool = False,
    headless: Optional[bool] = None,
    logger: Optional[Logger] = None,
) -> List[PackageResult]:
    """
    Öffnet die Seite, augmentiert alle (auch später nachgeladene) Pakete
    für `seconds` Sekunden und liefert die Ergebnisse.
    """
    async with BrowserFactory(headless=headless, logger=logger) as page:
        session = LivePackageSession(page, config, logger)
        await session.attach()

        _log(logger, f"🌐 Loading package page: {url}")
        try:
            await page.goto(url, timeout=SCRAPER_SETTINGS["TIMEOUT"], wait_until="domcontentloaded")
        except PlaywrightTimeoutError as e:
            raise NetworkError(f"Timeout loading {url}: {e}", url=url) from e

        await session.start()
        await page.wait_for_timeout(seconds * 1000)

        if sort:
            await session.sort()

        return session.results()


async def fetch_rendered_html(
    url: str,
    wait_ms: Optional[int] = None,
    headless: Optional[bool] = None,
    logger: Optional[Logger] = None,
) -> str:
    """HTML nach dem Rendern (für Seiten, die Pakete per JS nachladen)."""
    async with BrowserFactory(headless=headless, logger=logger) as page:
        _log(logger, f"🌐 Rendering package page: {url}")
        try:
            await page.goto(url, timeout=SCRAPER_SETTINGS["TIMEOUT"], wait_until="domcontentloaded")
        except PlaywrightTimeoutError as e:
            raise NetworkError(f"Timeout loading {url}: {e}", url=url) from e

        await page.wait_for_timeout(wait_ms if wait_ms is not None else SCRAPER_SETTINGS["WAIT_AFTER_LOAD"])
        return await page.content()


# ----------------------------------------------------------
# Sync wrappers (für Pipelines & FastAPI)
# ----------------------------------------------------------
def watch_live_page_sync(url: str, **kwargs) -> List[PackageResult]:
    return asyncio.run(watch_live_page(url, **kwargs))


def fetch_rendered_html_sync(url: str, **kwargs) -> str:
    return asyncio.run(fetch_rendered_html(url, **kwargs))
