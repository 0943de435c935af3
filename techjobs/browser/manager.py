import asyncio
import logging
from typing import Optional

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Playwright,
)

from techjobs.browser.context import create_context
from techjobs.browser.launch import create_browser
from techjobs.browser.user_agent import UserAgentProvider

logger = logging.getLogger(__name__)


class BrowserManager:
    """
    Owns the Playwright driver and the single browser shared by an ingestion
    run. Adapters never share a context: each call to new_context() returns a
    fresh one with its own cookies, storage and user agent.
    """

    def __init__(self):
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    async def initialize(self):
        """
        Start Playwright and launch the browser if not already running.
        Adapters start concurrently, so the launch is serialised.
        """
        async with self._lock:
            UserAgentProvider.initialize()

            if self._playwright is None:
                self._playwright = await async_playwright().start()
                logger.info("Playwright started.")

            if self._browser is None:
                self._browser = await create_browser(self._playwright)

    async def new_context(self) -> BrowserContext:
        if self._browser is None:
            await self.initialize()

        user_agent = UserAgentProvider.get_random()
        logger.debug(f"Using User Agent: {user_agent}")
        return await create_context(self._browser, user_agent)

    async def close(self):
        """
        Closes the browser and stops Playwright. Safe to call when nothing
        was started.
        """
        async with self._lock:
            if self._browser:
                try:
                    await self._browser.close()
                    logger.info("Browser closed.")
                except Exception as e:
                    logger.warning(f"Error closing browser: {e}")
                self._browser = None

            if self._playwright:
                try:
                    await self._playwright.stop()
                    logger.info("Playwright stopped.")
                except Exception as e:
                    logger.warning(f"Error stopping Playwright: {e}")
                self._playwright = None
