"""
Share-link validation service.

Checks a share URL against the host allow-list, expands short-links by
following redirects manually and verifies that the share is publicly
readable before a browser is spent on it.
"""

import logging
import re
from typing import List, NamedTuple, Optional
from urllib.parse import urljoin, urlparse

import httpx

from chat_export.config import settings
from chat_export.services.scraper.errors import ShareLinkError

logger = logging.getLogger(__name__)

LOGIN_PATH_PATTERN = re.compile(r"login|signin|auth|session", re.IGNORECASE)
LOGIN_HOST_PATTERN = re.compile(r"accounts\.google\.com|auth|login", re.IGNORECASE)
GEMINI_SHORT_LINK_HOST = "g.co"
GEMINI_SHORT_LINK_PATH = "/gemini/share/"
PRIVATE_SHARE_MESSAGE = (
    "This share link isn't public (redirects to login or returns an error). Open it in an "
    "incognito window; if it prompts to sign in, make the share public."
)


class ResolvedUrl(NamedTuple):
    """Outcome of following a share link's redirects."""

    url: str
    hops: int
    final: bool
    status: int = 0
    location: str = ""


class PreflightResult(NamedTuple):
    """Whether a share URL can be read without signing in."""

    ok: bool
    status: int
    location: str = ""
    reason: str = ""
    message: str = ""


def _host_allowed(host: str, allowed_hosts: List[str]) -> bool:
    host = host.lower()
    return any(host == allowed or host.endswith("." + allowed) for allowed in allowed_hosts)


def validate_share_url(url: str, allowed_hosts: Optional[List[str]] = None) -> str:
    """Return the hostname of ``url`` or raise ``ShareLinkError`` if it may not be scraped."""
    allowed = allowed_hosts if allowed_hosts is not None else settings.ALLOWED_SHARE_HOSTS
    if len(url) > settings.MAX_URL_LENGTH:
        raise ShareLinkError("URL_TOO_LONG", "URL exceeds maximum length.")
    try:
        parsed = urlparse(url)
        host = (parsed.hostname or "").lower()
    except ValueError as e:
        raise ShareLinkError("BAD_URL", "Invalid URL.", {"url": url}) from e
    if parsed.scheme not in ("http", "https") or not host:
        raise ShareLinkError("BAD_URL", "Invalid URL.", {"url": url})
    if not _host_allowed(host, allowed):
        raise ShareLinkError("DOMAIN_NOT_ALLOWED", "This domain is not supported.", {"host": host})
    if _host_allowed(host, [GEMINI_SHORT_LINK_HOST]) and not parsed.path.startswith(
        GEMINI_SHORT_LINK_PATH
    ):
        raise ShareLinkError(
            "DOMAIN_NOT_ALLOWED",
            "Only g.co/gemini/share/* short-links are supported.",
            {"host": host, "path": parsed.path},
        )
    return host


class ShareLinkService:
    """Service for turning a user-supplied share URL into a scrapeable one."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=settings.PREFLIGHT_TIMEOUT_SECONDS,
            follow_redirects=False,
            transport=self._transport,
        )

    async def resolve_share_url(self, url: str, max_hops: Optional[int] = None) -> ResolvedUrl:
        """Follow 3xx redirects one hop at a time (expands g.co short-links)."""
        hops_limit = max_hops if max_hops is not None else settings.MAX_REDIRECT_HOPS
        current = url
        async with self._client() as client:
            for hop in range(hops_limit):
                try:
                    resp = await client.get(current)
                except httpx.HTTPError as e:
                    logger.warning(f"Redirect resolution failed for {current}: {e}")
                    return ResolvedUrl(url=current, hops=hop, final=False)
                location = resp.headers.get("location", "")
                if 200 <= resp.status_code < 300:
                    return ResolvedUrl(url=current, hops=hop, final=True, status=resp.status_code)
                if 300 <= resp.status_code < 400 and location:
                    current = urljoin(current, location)
                    continue
                return ResolvedUrl(
                    url=current, hops=hop, final=False, status=resp.status_code, location=location
                )
        return ResolvedUrl(url=current, hops=hops_limit, final=False, status=310)

    async def check_public_access(self, url: str) -> PreflightResult:
        """A share is public if it answers 2xx, or redirects within its host to a non-login page."""
        target = urlparse(url)
        try:
            async with self._client() as client:
                resp = await client.get(url)
        except httpx.HTTPError as e:
            return PreflightResult(
                ok=False, status=0, reason="NETWORK", message=str(e) or "Network error"
            )

        status = resp.status_code
        location = resp.headers.get("location", "")
        redirect = urlparse(urljoin(url, location)) if location else None
        to_login = bool(
            redirect
            and (
                LOGIN_PATH_PATTERN.search((redirect.path or "") + (redirect.query or ""))
                or LOGIN_HOST_PATTERN.search(redirect.hostname or "")
            )
        )
        same_host = bool(redirect and redirect.hostname == target.hostname)
        if 200 <= status < 300 or (300 <= status < 400 and same_host and not to_login):
            return PreflightResult(ok=True, status=status, location=location)
        return PreflightResult(
            ok=False,
            status=status,
            location=location,
            reason="PRIVATE_OR_BLOCKED",
            message=PRIVATE_SHARE_MESSAGE,
        )

    async def prepare(self, url: str) -> str:
        """Validate, expand and preflight ``url``; return the final URL to scrape."""
        validate_share_url(url)
        resolved = await self.resolve_share_url(url)
        try:
            validate_share_url(resolved.url)
        except ShareLinkError as e:
            raise ShareLinkError(
                e.code,
                "Final URL host not allowed after redirect.",
                {
                    "finalUrl": resolved.url,
                    "hops": resolved.hops,
                    "status": resolved.status,
                    "location": resolved.location,
                },
            ) from e

        preflight = await self.check_public_access(resolved.url)
        if not preflight.ok:
            raise ShareLinkError(
                "PRIVATE_SHARE",
                preflight.message,
                {"status": preflight.status, "location": preflight.location},
            )
        logger.debug(f"Share URL {url} resolved to {resolved.url} in {resolved.hops} hop(s)")
        return resolved.url
