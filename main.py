"""
Preis pro GB für eine Paket-Seite berechnen.

    python main.py https://example.ir/packages
    python main.py saved_page.html

Ohne Argument wird PPGB_TARGET_URL verwendet. Ist PPGB_OUTPUT_HTML gesetzt,
wird das augmentierte HTML dorthin geschrieben. PPGB_SORT=1 sortiert die
Pakete, PPGB_RENDER=1 lädt die Seite über Playwright statt requests.
"""

import logging
import os
import sys
from pathlib import Path

import config
from pipelines.augment_page import augment_source, summarize
from scraper.errors.exceptions import ScraperError


def run() -> int:
    config.configure_logging()
    log = logging.getLogger("pricepergb")

    source = sys.argv[1] if len(sys.argv) > 1 else config.ACTIVE_CONFIG.SCRAPER["TARGET_URL"]
    if not source:
        print("❌ No page given (argument or PPGB_TARGET_URL)")
        return 1

    sort = os.getenv("PPGB_SORT", "0") == "1"
    render = os.getenv("PPGB_RENDER", "0") == "1"

    try:
        page, results = augment_source(
            source,
            config=config.build_pipeline_config(),
            sort=sort,
            render=render,
            logger=log.info,
        )
    except ScraperError as e:
        print(f"❌ {e}")
        return 1

    print(f"\nPackages on {source}:\n")
    for line in summarize(results):
        print(line)

    output = config.ACTIVE_CONFIG.SCRAPER["OUTPUT_HTML"]
    if output:
        Path(output).write_text(page.html(), encoding="utf-8")
        print(f"\n💾 Augmented HTML written to {output}")

    return 0


if __name__ == "__main__":
    raise SystemExit(run())
