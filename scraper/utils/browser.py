import subprocess
import sys
from typing import Callable, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from scraper.sources.scraper_config import SCRAPER_SETTINGS

Logger = Callable[[str], None]


def _log(logger: Optional[Logger], msg: str) -> None:
    if logger is not None:
        logger(msg)
    else:
        print(msg)


def ensure_browsers_installed(logger: Optional[Logger] = None) -> None:
    """
    Python-Paket 'playwright' ist installiert, der Chromium-Browser aber nicht
    (frische venv, CI). Einmalig nachinstallieren.
    """
    _log(logger, "Playwright browser missing – installing Chromium (30–60 seconds on first run)…")
    cmd = [sys.executable, "-m", "playwright", "install", "chromium"]
    subprocess.run(cmd, check=True)
    _log(logger, "Playwright Chromium installation finished ✅")


class BrowserFactory:
    def __init__(self, headless: Optional[bool] = None, logger: Optional[Logger] = None):
        # None -> headless; sichtbarer Browser nur auf Wunsch (DevConfig)
        self.headless = True if headless is None else headless
        self.logger = logger
        self.browser = None
        self.page = None
        self.pw = None

    async def _launch(self):
        return await self.pw.chromium.launch(
            headless=self.headless,
            args=[
                "--disable-blink-features=AutomationControlled",
                "--no-sandbox",
                "--disable-dev-shm-usage",
            ],
        )

    async def __aenter__(self):
        self.pw = await async_playwright().start()

        try:
            self.browser = await self._launch()
        except PlaywrightError as e:
            # Typischer Fehler: "Executable doesn't exist at /home/.../ms-playwright/chromium-..."
            if "Executable doesn't exist" not in str(e):
                await self.pw.stop()
                raise
            ensure_browsers_installed(self.logger)
            self.browser = await self._launch()

        context = await self.browser.new_context(
            viewport=SCRAPER_SETTINGS["VIEWPORT"],
            java_script_enabled=True,
            locale=SCRAPER_SETTINGS["LOCALE"],
            timezone_id=SCRAPER_SETTINGS["TIMEZONE"],
            user_agent=SCRAPER_SETTINGS["USER_AGENT"],
        )

        self.page = await context.new_page()
        return self.page

    async def __aexit__(self, exc_type, exc, tb):
        try:
            if self.browser:
                await self.browser.close()
            if self.pw:
                await self.pw.stop()
        except PlaywrightError as e:
            _log(self.logger, f"⚠️ Browser shutdown failed: {e}")
