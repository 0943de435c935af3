import logging
from typing import Optional

from fake_useragent import UserAgent

logger = logging.getLogger(__name__)

# Used whenever fake_useragent can't load its browser data
FALLBACK_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)


class UserAgentProvider:
    """
    Hands out realistic desktop user-agent strings, one per browser context.
    """

    _ua: Optional[UserAgent] = None

    @classmethod
    def initialize(cls):
        if cls._ua is not None:
            return
        try:
            # Chromium is what we launch, so only hand out Chrome/Edge strings.
            cls._ua = UserAgent(
                browsers=["chrome", "edge"],
                os=["windows", "macos"],
                fallback=FALLBACK_UA,
            )
        except Exception as e:
            logger.warning(f"Failed to initialize fake_useragent, using fallback: {e}")

    @classmethod
    def get_random(cls) -> str:
        if cls._ua is None:
            return FALLBACK_UA
        try:
            return cls._ua.random
        except Exception as e:
            logger.debug(f"fake_useragent lookup failed: {e}")
            return FALLBACK_UA
