# scraper/sources/scraper_config.py

SCRAPER_SETTINGS = {
    "TIMEOUT": 70000,
    "WAIT_AFTER_LOAD": 2000,
    "VIEWPORT": {"width": 1400, "height": 1000},
    "LOCALE": "fa-IR",
    "TIMEZONE": "Asia/Tehran",
    "USER_AGENT": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/123.0.0.0 Safari/537.36"
    ),
    "HTTP_TIMEOUT": 15,
}
