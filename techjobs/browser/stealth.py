import logging

from playwright.async_api import BrowserContext

logger = logging.getLogger(__name__)


def _platform_for(user_agent: str) -> str:
    if "Windows" in user_agent:
        return "Win32"
    if "Mac" in user_agent:
        return "MacIntel"
    return "Linux x86_64"


async def apply_stealth_scripts(context: BrowserContext, user_agent: str) -> None:
    """
    Mask the most common headless-automation tells before any page script runs:
    navigator.webdriver, an empty plugin list, a platform that disagrees with
    the user agent and the missing window.chrome object.
    """
    platform = _platform_for(user_agent)
    await context.add_init_script(f"""
        Object.defineProperty(navigator, 'webdriver', {{
            get: () => undefined
        }});
        Object.defineProperty(navigator, 'platform', {{
            get: () => '{platform}'
        }});
        Object.defineProperty(navigator, 'languages', {{
            get: () => ['en-GB', 'en']
        }});
        Object.defineProperty(navigator, 'plugins', {{
            get: () => [
                {{name: 'Chrome PDF Plugin', filename: 'internal-pdf-viewer', description: 'Portable Document Format'}},
                {{name: 'Chrome PDF Viewer', filename: 'mhjfbmdgcfjbbpaeojofohoefgiehjai', description: ''}}
            ]
        }});
        window.chrome = window.chrome || {{ runtime: {{}} }};

        const originalQuery = window.navigator.permissions.query;
        window.navigator.permissions.query = (parameters) => (
            parameters.name === 'notifications' ?
                Promise.resolve({{ state: Notification.permission }}) :
                originalQuery(parameters)
        );
    """)
    logger.debug(f"Stealth scripts applied (platform: {platform})")
