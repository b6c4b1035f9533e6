"""Website research for discovery context.

Scrapes company websites through Firecrawl and turns them into the
business context (seller, prospect, business case, catalyst) that seeds a
discovery session or a demo conversation.
"""

from .errors import ResearchError
from .firecrawl_client import FirecrawlClient, SERVICE_KEYWORDS, INDUSTRY_KEYWORDS
from .website_analyzer import WebsiteAnalyzer, ResearchAgent

__all__ = [
    "ResearchError",
    "FirecrawlClient",
    "SERVICE_KEYWORDS",
    "INDUSTRY_KEYWORDS",
    "WebsiteAnalyzer",
    "ResearchAgent",
]
