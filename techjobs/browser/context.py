import logging

from playwright.async_api import Browser, BrowserContext

from techjobs.browser.stealth import apply_stealth_scripts
from techjobs.config.settings import settings

logger = logging.getLogger(__name__)


async def create_context(browser: Browser, user_agent: str) -> BrowserContext:
    """
    Create an isolated context (own cookies and storage) that looks like a
    desktop browser in London.
    """
    context = await browser.new_context(
        user_agent=user_agent,
        viewport={"width": 1366, "height": 768},
        locale=settings.LOCALE,
        timezone_id=settings.TIMEZONE_ID,
        ignore_https_errors=settings.IGNORE_HTTPS_ERRORS,
        extra_http_headers={
            "Accept-Language": "en-GB,en;q=0.9",
            "DNT": "1",
            "Upgrade-Insecure-Requests": "1",
        },
    )
    context.set_default_navigation_timeout(settings.DETAIL_TIMEOUT)

    await apply_stealth_scripts(context, user_agent)
    return context
