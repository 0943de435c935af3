import pytest

from techjobs.browser import context as context_module
from techjobs.browser.manager import BrowserManager
from techjobs.browser.stealth import _platform_for, apply_stealth_scripts
from techjobs.browser.user_agent import FALLBACK_UA, UserAgentProvider


class RecordingContext:
    def __init__(self):
        self.scripts = []
        self.navigation_timeout = None

    async def add_init_script(self, script):
        self.scripts.append(script)

    def set_default_navigation_timeout(self, timeout):
        self.navigation_timeout = timeout


class RecordingBrowser:
    def __init__(self):
        self.options = None
        self.context = RecordingContext()

    async def new_context(self, **options):
        self.options = options
        return self.context


@pytest.mark.parametrize(
    "user_agent, platform",
    [
        ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/122.0", "Win32"),
        (FALLBACK_UA, "MacIntel"),
        ("Mozilla/5.0 (X11; Linux x86_64) Chrome/122.0", "Linux x86_64"),
    ],
)
def test_platform_matches_user_agent(user_agent, platform):
    assert _platform_for(user_agent) == platform


@pytest.mark.asyncio
async def test_stealth_script_masks_webdriver():
    context = RecordingContext()
    await apply_stealth_scripts(context, FALLBACK_UA)

    assert len(context.scripts) == 1
    assert "'webdriver'" in context.scripts[0]
    assert "MacIntel" in context.scripts[0]


@pytest.mark.asyncio
async def test_context_looks_like_a_london_desktop():
    browser = RecordingBrowser()
    created = await context_module.create_context(browser, FALLBACK_UA)

    assert created is browser.context
    assert browser.options["user_agent"] == FALLBACK_UA
    assert browser.options["locale"] == "en-GB"
    assert browser.options["timezone_id"] == "Europe/London"
    assert browser.options["viewport"] == {"width": 1366, "height": 768}
    assert created.navigation_timeout == context_module.settings.DETAIL_TIMEOUT
    assert created.scripts


def test_user_agent_falls_back_when_uninitialised(monkeypatch):
    monkeypatch.setattr(UserAgentProvider, "_ua", None)
    assert UserAgentProvider.get_random() == FALLBACK_UA


@pytest.mark.asyncio
async def test_close_without_launch_is_safe():
    manager = BrowserManager()
    await manager.close()
    assert not manager.is_running
