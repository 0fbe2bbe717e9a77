"""Render live pages with Playwright and audit the resulting DOM.

Requires the optional ``browser`` extra (``pip install actkit[browser]``)
and an installed Chromium (``playwright install chromium``).
"""

from __future__ import annotations

from actkit.builtin.adapters.html.document import HtmlDocument
from actkit.kernel.exceptions import DocumentLoadError
from actkit.kernel.logging import get_logger

logger = get_logger(__name__)

DEFAULT_NAVIGATION_TIMEOUT_MS = 30_000


async def load_live_document(
    url: str, timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS, wait_until: str = "load"
) -> HtmlDocument:
    """Open ``url`` in headless Chromium and snapshot the rendered markup.

    Raises
    ------
    DocumentLoadError
        If Playwright is missing or navigation fails
    """
    try:
        from playwright.async_api import Error as PlaywrightError
        from playwright.async_api import async_playwright
    except ImportError as e:
        raise DocumentLoadError(
            url, "playwright is not installed; install the 'browser' extra"
        ) from e

    logger.info("Rendering {url}", url=url)
    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(args=["--no-sandbox"], headless=True)
            try:
                page = await browser.new_page()
                page.set_default_timeout(timeout_ms)
                await page.goto(url, wait_until=wait_until)
                markup = await page.content()
                final_url = page.url
            finally:
                await browser.close()
    except PlaywrightError as e:
        raise DocumentLoadError(url, str(e)) from e

    logger.debug("Rendered {size} characters from {url}", size=len(markup), url=final_url)
    return HtmlDocument.from_string(markup, url=final_url)
