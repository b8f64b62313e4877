"""
Browser lifecycle manager — launch, observe, close.

Launches a persistent Chromium context and binds a NetworkLedger to the
inspected page, so every exchange the page makes is recorded from the
first navigation on.
"""

from __future__ import annotations

import os
from pathlib import Path
from patchright.async_api import async_playwright, BrowserContext, Page, Playwright

from netledger.config import Config
from netledger.log import setup_logging
from netledger.network.ledger import NetworkLedger

log = setup_logging("browser")


def _cleanup_stale_locks(data_dir: Path) -> None:
    """
    Remove Chromium singleton lock files left behind by a crashed session.

    They prevent a new instance from using the same data dir.
    """
    for name in ("SingletonLock", "SingletonSocket", "SingletonCookie"):
        path = data_dir / name
        if path.exists() or path.is_symlink():
            try:
                path.unlink()
                log.info(f"Removed stale lock file: {name}")
            except OSError as e:
                log.warning(f"Could not remove {name}: {e}")


class BrowserManager:
    """Manages one persistent Chromium context and its inspected page."""

    def __init__(self) -> None:
        self._playwright: Playwright | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None
        self._ledger: NetworkLedger | None = None

    async def start(self) -> Page:
        """
        Launch the browser and start recording network traffic.

        Returns the active page ready for navigation.
        """
        Config.ensure_dirs()
        _cleanup_stale_locks(Config.BROWSER_DATA_DIR)

        log.info("Launching browser...")
        self._playwright = await async_playwright().start()

        chrome_args = ["--no-first-run", "--no-default-browser-check"]
        if os.path.exists("/.dockerenv"):
            chrome_args.extend(["--no-sandbox", "--disable-setuid-sandbox", "--disable-gpu"])

        self._context = await self._playwright.chromium.launch_persistent_context(
            user_data_dir=str(Config.BROWSER_DATA_DIR),
            headless=Config.HEADLESS,
            slow_mo=Config.SLOW_MO,
            args=chrome_args,
        )
        self._context.set_default_navigation_timeout(float(Config.NAVIGATION_TIMEOUT))

        if self._context.pages:
            self._page = self._context.pages[0]
        else:
            self._page = await self._context.new_page()

        self._ledger = NetworkLedger()
        self._ledger.start(self._page)
        self._page.on("close", self._on_page_close)

        log.info("Browser ready — network ledger attached")
        return self._page

    @property
    def page(self) -> Page:
        """Get the inspected page. Raises if browser not started."""
        if self._page is None:
            raise RuntimeError("Browser not started. Call start() first.")
        return self._page

    @property
    def context(self) -> BrowserContext:
        """Get the browser context."""
        if self._context is None:
            raise RuntimeError("Browser not started. Call start() first.")
        return self._context

    @property
    def ledger(self) -> NetworkLedger:
        """Ledger of the inspected page."""
        if self._ledger is None:
            raise RuntimeError("Browser not started. Call start() first.")
        return self._ledger

    async def navigate(self, url: str) -> None:
        """Navigate to a URL and wait for page load."""
        log.info(f"Navigating to {url}")
        await self.page.goto(url, wait_until="domcontentloaded")
        log.info("Page loaded")

    def _on_page_close(self, page: Page) -> None:
        if self._ledger is not None:
            self._ledger.stop()
        log.info("Inspected page closed")

    async def close(self) -> None:
        """Gracefully close the browser context and playwright instance."""
        log.info("Closing browser...")
        try:
            if self._ledger:
                self._ledger.stop()
            if self._context:
                await self._context.close()
            if self._playwright:
                await self._playwright.stop()
        except Exception as e:
            log.error(f"Error closing browser: {e}")
        finally:
            self._context = None
            self._page = None
            self._ledger = None
            self._playwright = None
            log.info("Browser closed")
