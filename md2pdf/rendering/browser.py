"""Headless Chromium access through Playwright."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict, List, Optional

from playwright.async_api import async_playwright

from md2pdf.config import Config
from md2pdf.pagination.measurers import BrowserLayoutMeasurer

BROWSER_CANDIDATES: List[str] = [
    "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
    "/Applications/Chromium.app/Contents/MacOS/Chromium",
    "/Applications/Microsoft Edge.app/Contents/MacOS/Microsoft Edge",
    "/Applications/Brave Browser.app/Contents/MacOS/Brave Browser",
    "/usr/bin/google-chrome",
    "/usr/bin/google-chrome-stable",
    "/usr/bin/chromium",
    "/usr/bin/chromium-browser",
    "/usr/bin/microsoft-edge",
]

LAUNCH_ARGS = ["--no-sandbox"]


def resolve_browser_executable(candidates: Optional[List[str]] = None) -> Optional[str]:
    """
    Find a Chromium-based browser.

    ``CHROME_PATH`` wins when it points at an existing file. Returns None
    when nothing is found, in which case Playwright's own Chromium is used.
    """
    from_env = Config.get_chrome_path()
    search = [from_env] if from_env else []
    search.extend(BROWSER_CANDIDATES if candidates is None else candidates)
    for candidate in search:
        if candidate and Path(candidate).is_file():
            return candidate
    return None


@asynccontextmanager
async def open_browser_page(
    viewport: Optional[Dict[str, int]] = None,
    executable_path: Optional[str] = None,
) -> AsyncIterator:
    """
    Launch headless Chromium and yield a fresh page.

    The browser is closed on every exit path.

    Args:
        viewport: Page viewport (default from config)
        executable_path: Browser executable (default: auto-detect)
    """
    executable = executable_path or resolve_browser_executable()
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(
            executable_path=executable, headless=True, args=LAUNCH_ARGS
        )
        try:
            page = await browser.new_page(viewport=viewport or Config.get_viewport())
            yield page
        finally:
            await browser.close()


async def wait_for_settle(page, settle_ms: Optional[int] = None) -> None:
    """Wait for web fonts and late async content before reading layout."""
    await page.evaluate("() => document.fonts ? document.fonts.ready.then(() => true) : true")
    delay = Config.get_print_settle_ms() if settle_ms is None else settle_ms
    if delay > 0:
        await page.wait_for_timeout(delay)


@asynccontextmanager
async def open_browser_measurer(
    shell_html: str,
    viewport: Optional[Dict[str, int]] = None,
    executable_path: Optional[str] = None,
) -> AsyncIterator[BrowserLayoutMeasurer]:
    """Yield a BrowserLayoutMeasurer over the given measuring shell."""
    async with open_browser_page(viewport, executable_path) as page:
        await page.set_content(shell_html, wait_until="load")
        await wait_for_settle(page, settle_ms=0)
        yield BrowserLayoutMeasurer(page)
