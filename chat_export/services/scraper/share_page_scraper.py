"""
Share Page Scraper Service.

Loads public chat share pages with Playwright and returns their visible text.
When the page exposes one list item per turn (Gemini), the items are joined
with the reserved turn delimiter so the transcript parser can attribute roles
without guessing.
"""

import logging
import random
import re
from typing import Dict, List, Optional
from urllib.parse import urlparse

import html2text
from playwright.async_api import Browser, Page, async_playwright
from playwright.async_api import Error as PlaywrightError

from chat_export.config import settings
from chat_export.services.scraper.errors import ChatNotFound, ScrapeFailed
from chat_export.services.transcript.noise_filter import strip_masthead
from chat_export.services.transcript.patterns import get_patterns

logger = logging.getLogger(__name__)

EXCESS_BLANK_LINES = re.compile(r"\n{3,}")
GEMINI_TURN_SELECTOR = 'c-wiz[role="list"] [role="listitem"], [role="listitem"]'


def selectors_for_host(host: str) -> List[str]:
    """Candidate containers for conversation text, most specific first."""
    host = host.lower()
    if "gemini.google.com" in host:
        return ['c-wiz[role="list"] [role="listitem"]', '[role="listitem"]', "main"]
    if "chatgpt" in host or "openai" in host:
        return ['[data-testid="conversation-turn"]', "article", "main"]
    if "x.ai" in host or "grok.com" in host:
        return ['div[data-testid="message-bubble"]', "main"]
    if "lechat.mistral.ai" in host:
        return ['div[class*="conversation-turn"]', "main"]
    if "claude.ai" in host:
        return ['main [data-testid="message"]', "main article", "main"]
    return ["body"]


def finalize_text(text: str, host: str) -> str:
    """Strip the provider masthead and collapse runs of blank lines."""
    text = strip_masthead(text.replace("\r\n", "\n"), source_host=host)
    return EXCESS_BLANK_LINES.sub("\n\n", text).strip()


class SharePageScraperService:
    """Service for extracting visible conversation text from share URLs."""

    def __init__(self) -> None:
        self.user_agents = [
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
        ]
        self.viewports = [
            {"width": 1440, "height": 900},
            {"width": 1366, "height": 768},
            {"width": 1280, "height": 720},
        ]

        self.html_converter = html2text.HTML2Text()
        self.html_converter.ignore_links = True
        self.html_converter.ignore_images = True
        self.html_converter.body_width = 0

    def _get_random_config(self) -> Dict:
        return {
            "user_agent": random.choice(self.user_agents),
            "viewport": random.choice(self.viewports),
        }

    async def _click_by_text(self, page: Page, labels: List[str]) -> Optional[str]:
        """Click the first visible button named exactly like one of ``labels``.

        Returns the label that was clicked, or None. Stops after the first click.
        """
        for label in labels:
            buttons = page.get_by_role("button", name=label, exact=True)
            try:
                for idx in range(await buttons.count()):
                    button = buttons.nth(idx)
                    if await button.is_visible():
                        await button.click()
                        return label
            except PlaywrightError as e:
                logger.debug(f"Clicking '{label}' failed: {e}")
        return None

    async def _collect_turn_blocks(self, page: Page) -> str:
        blocks: List[str] = []
        for el in await page.query_selector_all(GEMINI_TURN_SELECTOR):
            text = (await el.inner_text()).strip()
            if text:
                blocks.append(text)
        if blocks:
            delimiter = get_patterns().turn_delimiter
            return f"\n\n{delimiter}\n\n".join(blocks)
        main = await page.query_selector("main")
        return (await main.inner_text()).strip() if main else ""

    async def _collect_by_selectors(self, page: Page, selectors: List[str]) -> str:
        for sel in selectors:
            pile: List[str] = []
            for el in await page.query_selector_all(sel):
                text = (await el.inner_text()).strip()
                if text:
                    pile.append(text)
            if pile:
                return "\n\n".join(pile)
        return ""

    async def _extract_text(self, page: Page, host: str) -> str:
        extracted = ""
        if "gemini.google.com" in host:
            extracted = await self._collect_turn_blocks(page)

        if len(extracted) < settings.MIN_EXTRACT_LENGTH:
            extracted = await self._collect_by_selectors(page, selectors_for_host(host))

        if len(extracted) < settings.MIN_EXTRACT_LENGTH:
            html = await page.content()
            extracted = self.html_converter.handle(html).strip()

        return finalize_text(extracted, host)

    async def _scrape_with_browser(self, browser: Browser, url: str) -> str:
        config = self._get_random_config()
        origin = f"{urlparse(url).scheme}://{urlparse(url).netloc}/"
        context = await browser.new_context(
            user_agent=config["user_agent"],
            viewport=config["viewport"],
            locale="en-US",
            extra_http_headers={
                "Accept-Language": "en-US,en;q=0.9",
                "Referer": origin,
                "Upgrade-Insecure-Requests": "1",
            },
        )
        try:
            page = await context.new_page()
            response = await page.goto(
                url, wait_until="networkidle", timeout=settings.SCRAPE_TIMEOUT_MS
            )
            status = response.status if response else None
            if status == 404:
                raise ChatNotFound("Shared conversation not found")
            if status is None or status >= 400:
                raise ScrapeFailed(f"Navigation failed ({status or 'unknown'})", status=status)

            await self._click_by_text(page, ["Accept", "I agree", "Got it", "Continue"])
            await page.wait_for_timeout(800)
            await self._click_by_text(page, ["Show more", "Expand", "See more"])
            await page.wait_for_timeout(500)

            host = (urlparse(url).hostname or "").lower()
            return await self._extract_text(page, host)
        finally:
            await context.close()

    async def scrape_text(self, url: str, ws_endpoint: Optional[str] = None) -> str:
        """Return the visible conversation text of a public share page."""
        endpoint = ws_endpoint if ws_endpoint is not None else settings.BROWSER_WS_ENDPOINT
        logger.debug(f"Scraping share page {url}")
        async with async_playwright() as p:
            if endpoint:
                browser = await p.chromium.connect_over_cdp(endpoint)
            else:
                browser = await p.chromium.launch(headless=True)
            try:
                text = await self._scrape_with_browser(browser, url)
            except (ChatNotFound, ScrapeFailed):
                raise
            except Exception as e:
                logger.exception(f"Scraping {url} failed: {e}")
                raise ScrapeFailed(f"Failed to extract conversation: {e}") from e
            finally:
                await browser.close()
        logger.info(f"Scraped {len(text)} characters from {url}")
        return text
