"""Firecrawl client for scraping company websites.

Uses the Firecrawl HTTP API directly (POST {base_url}/scrape). Scrape
failures are reported in the ScrapeResult rather than raised so callers can
decide whether a missing website is fatal.
"""

import os
import re
from typing import Any, Dict, List, Optional, Sequence

from config import settings
from contracts import ScrapeResult, WebsiteContext
from .errors import ResearchError


SERVICE_KEYWORDS = [
    "consulting", "development", "integration", "support", "training",
    "implementation", "migration", "optimization", "assessment", "automation",
    "design", "architecture", "engineering", "analytics", "security",
]

INDUSTRY_KEYWORDS = [
    "healthcare", "finance", "retail", "manufacturing", "technology",
    "education", "government", "energy", "automotive", "aerospace",
    "pharmaceutical", "insurance", "telecommunications", "media", "transportation",
]

MAX_SERVICES = 10
MAX_SERVICE_PHRASE = 50


class FirecrawlClient:
    """Thin wrapper over the Firecrawl scrape endpoint."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ):
        self.base_url = (base_url or settings.firecrawl_api_url).rstrip("/")
        self.api_key = api_key or settings.firecrawl_api_key or os.environ.get("FIRECRAWL_API_KEY", "")
        self.timeout_ms = timeout_ms or settings.scrape_timeout_ms

    def is_available(self) -> bool:
        return bool(self.api_key)

    def scrape(
        self,
        url: str,
        formats: Sequence[str] = ("markdown",),
        only_main_content: bool = True,
        timeout_ms: Optional[int] = None,
    ) -> ScrapeResult:
        """Scrape one URL.

        Returns:
            ScrapeResult; success is False with an error message on any failure
        """
        import requests

        if not self.api_key:
            return ScrapeResult(success=False, error="Firecrawl API key not configured")

        timeout_ms = timeout_ms or self.timeout_ms
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        try:
            r = requests.post(
                f"{self.base_url}/scrape",
                headers=headers,
                json={
                    "url": url,
                    "formats": list(formats),
                    "onlyMainContent": only_main_content,
                    "timeout": timeout_ms,
                },
                # HTTP timeout leaves headroom over the page-load timeout
                timeout=timeout_ms / 1000 + 10,
            )
        except requests.RequestException as e:
            print(f"[research] Scrape failed for {url}: {e}")
            return ScrapeResult(success=False, error=str(e))

        if not r.ok:
            try:
                message = r.json().get("error")
            except ValueError:
                message = None
            error = message or f"HTTP {r.status_code}: {r.reason}"
            print(f"[research] Scrape failed for {url}: {error}")
            return ScrapeResult(success=False, error=error)

        try:
            body = r.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            error = f"Invalid response from Firecrawl (HTTP {r.status_code})"
            print(f"[research] Scrape failed for {url}: {error}")
            return ScrapeResult(success=False, error=error)

        data = body.get("data") or {}
        return ScrapeResult(
            success=True,
            markdown=data.get("markdown") or data.get("content") or "",
            metadata=data.get("metadata") or {},
        )

    def extract_business_context(self, domain: str) -> WebsiteContext:
        """Scrape a company website and pull out keyword-level context.

        Raises:
            ResearchError: If the site could not be scraped
        """
        url = domain if domain.startswith("http") else f"https://{domain}"
        result = self.scrape(url)
        if not result.success:
            raise ResearchError(result.error or f"Failed to scrape website: {url}")
        return context_from_scrape(result, domain)


def context_from_scrape(result: ScrapeResult, domain: str) -> WebsiteContext:
    metadata: Dict[str, Any] = result.metadata
    title = metadata.get("title") or ""
    company_name = metadata.get("ogSiteName") or title.split(" - ")[0] or domain
    return WebsiteContext(
        company_name=company_name,
        description=metadata.get("ogDescription") or metadata.get("description") or "",
        services=extract_services(result.markdown),
        industries=extract_industries(result.markdown),
        content=result.markdown,
    )


def extract_services(content: str) -> List[str]:
    """Short phrases around service keywords, first ten distinct."""
    services: List[str] = []
    lower = content.lower()
    for keyword in SERVICE_KEYWORDS:
        if keyword not in lower:
            continue
        pattern = re.compile(rf"\b([\w ]+ )?{keyword}( [\w ]+)?\b", re.IGNORECASE)
        for match in pattern.finditer(content):
            phrase = match.group(0).strip()
            if len(phrase) < MAX_SERVICE_PHRASE and phrase not in services:
                services.append(phrase)
    return services[:MAX_SERVICES]


def extract_industries(content: str) -> List[str]:
    lower = content.lower()
    return [keyword.capitalize() for keyword in INDUSTRY_KEYWORDS if keyword in lower]
