import logging

from playwright.async_api import Browser, Playwright

from techjobs.config.settings import settings

logger = logging.getLogger(__name__)

# Launch arguments that hide the automation banner and keep headless
# Chromium stable inside containers.
LAUNCH_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
    "--no-sandbox",
    "--no-first-run",
    "--disable-gpu",
    "--mute-audio",
]


async def create_browser(playwright: Playwright) -> Browser:
    """
    Launch the Chromium instance every adapter opens its context in.
    """
    browser = await playwright.chromium.launch(
        headless=settings.HEADLESS,
        args=LAUNCH_ARGS,
    )
    logger.info(f"Browser launched (Headless: {settings.HEADLESS}).")
    return browser
