# pipelines/augment_page.py

from typing import List, Optional, Tuple

from engine.vocabulary import PipelineConfig
from scraper.errors.exceptions import ExtractionError
from scraper.interfaces.models import PackageResult
from scraper.sources.package_page import Logger, PackagePage, _log
from scraper.sources.package_watcher import PackageWatcher
from scraper.sources.page_fetch import is_url, load_html


def augment_html(
    html: str,
    config: Optional[PipelineConfig] = None,
    sort: bool = False,
    logger: Optional[Logger] = None,
) -> Tuple[PackagePage, List[PackageResult]]:
    """
    HTML -> augmentiertes HTML + Ergebnisliste.

    Wirft ExtractionError, wenn auf der Seite gar keine Paket-Box steht
    (dann stimmen meist die Selektoren nicht).
    """
    page = PackagePage(html, config=config, logger=logger)
    if not page.packages():
        raise ExtractionError(
            f"No package container found for selector {page.config.selectors.container!r}"
        )

    watcher = PackageWatcher(page.processor, logger=logger)
    watcher.start(page.soup)

    if sort:
        page.sort_packages()

    return page, page.results()


def augment_source(
    source: str,
    config: Optional[PipelineConfig] = None,
    sort: bool = False,
    render: bool = False,
    logger: Optional[Logger] = None,
) -> Tuple[PackagePage, List[PackageResult]]:
    """URL oder Datei laden und augmentieren. render=True -> Playwright statt requests."""
    if render and is_url(source):
        # lazy: Playwright nur laden, wenn wirklich gerendert wird
        from scraper.sources.live_page import fetch_rendered_html_sync

        html = fetch_rendered_html_sync(source, logger=logger)
    else:
        html = load_html(source)

    _log(logger, f"📄 Loaded {len(html)} characters from {source}")
    return augment_html(html, config=config, sort=sort, logger=logger)


def summarize(results: List[PackageResult]) -> List[str]:
    lines = []
    for row in results:
        if row.metric is None:
            lines.append(
                f"#{row.index:<3} skipped ({row.skipped_reason})  "
                f"price={row.price_text!r} size={row.size_text!r}"
            )
            continue

        flag = " (guessed unit)" if row.size_reading.is_heuristic else ""
        lines.append(
            f"#{row.index:<3} {row.formatted:>10} per GB  "
            f"price={row.price:,.0f}  size={row.size_gb:g} GB{flag}"
        )
    return lines
