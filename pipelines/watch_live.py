# pipelines/watch_live.py

import os

import config
from pipelines.augment_page import summarize
from scraper.sources.live_page import watch_live_page_sync


def main():
    """
    Live-Seite im (sichtbaren) Browser öffnen und nachgeladene Pakete
    augmentieren. Steuerbar über Env-Variablen:

    - PPGB_TARGET_URL      (Pflicht)
    - PPGB_WATCH_SECONDS   (default: aus config)
    - PPGB_SORT            ("1" -> am Ende nach Preis/GB sortieren)
    """
    url = config.ACTIVE_CONFIG.SCRAPER["TARGET_URL"]
    if not url:
        print("⚠️ PPGB_TARGET_URL is not set.")
        return

    seconds = float(os.getenv("PPGB_WATCH_SECONDS", config.ACTIVE_CONFIG.SCRAPER["WATCH_SECONDS"]))
    sort = os.getenv("PPGB_SORT", "0") == "1"

    print(f"🚀 Watching {url} for {seconds:g}s …")
    results = watch_live_page_sync(
        url,
        config=config.build_pipeline_config(),
        seconds=seconds,
        sort=sort,
        headless=config.ACTIVE_CONFIG.SCRAPER["HEADLESS"],
    )

    print(f"✅ {len(results)} packages seen.")
    for line in summarize(results):
        print(line)


if __name__ == "__main__":
    main()
