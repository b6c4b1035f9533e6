"""Website analyzer: seller + prospect websites -> BusinessContext.

Scrapes both sites, asks the LLM to extract structured company/prospect
facts, then drafts a one-line business case and the catalyst that makes the
conversation urgent.
"""

import json
import re
from typing import Optional

from pydantic import BaseModel, ValidationError

from agents.base_agent import BaseAgent
from config import settings
from contracts import BusinessContext, CompanyInfo, ProspectInfo
from providers import ProviderError
from .errors import ResearchError
from .firecrawl_client import FirecrawlClient


class ResearchAgent(BaseAgent):
    """Plain-text extraction agent for website research."""

    SYSTEM_PROMPT = """You are a B2B market researcher. You read company websites and
extract precise, factual information. When asked for JSON, return only JSON."""

    def __init__(self, model: Optional[str] = None, provider: Optional[str] = None, **kwargs):
        super().__init__(
            role="research",
            system_prompt=self.SYSTEM_PROMPT,
            output_schema=BusinessContext,
            model=model,
            provider=provider,
            max_tokens=settings.max_tokens_research,
            **kwargs,
        )

    def get_task_description(self) -> str:
        return "Extract company and prospect facts from website content"


COMPANY_PROMPT = """From this website content, extract:
1. Company name
2. Specific sub-industry (be precise: "civil engineering" not "engineering")
3. Services offered (list top 3-5)
4. Typical client types

Content: {content}

Return as JSON: {{"name": "", "sub_industry": "", "services": [], "typical_clients": []}}"""

PROSPECT_PROMPT = """From this website content, extract:
1. Organization name
2. Organization type (company, government, nonprofit, etc.)
3. Industry/sector
4. Current initiatives or needs (from news, about, procurement pages)

Content: {content}

Return as JSON: {{"name": "", "org_type": "", "industry": "", "current_needs": []}}"""

BUSINESS_CASE_PROMPT = """Create a specific business case for:
Seller: {seller} - a {sub_industry} firm offering {services}
Buyer: {buyer} - a {org_type} in {industry}

Which of the seller's services would this buyer most likely need?
Create one specific, realistic business case sentence.

Format: "{seller} helping {buyer} with [specific service] for [specific use case]\""""

CATALYST_PROMPT = """Given this business case: "{business_case}"

What is the most likely urgent catalyst for why they're talking RIGHT NOW?
Consider: deadlines, regulations, incidents, competition, funding, failures

Return one specific, timely catalyst (one sentence)."""


class WebsiteAnalyzer:
    """Builds a BusinessContext from the seller's and the prospect's websites."""

    def __init__(
        self,
        client: Optional[FirecrawlClient] = None,
        agent: Optional[ResearchAgent] = None,
    ):
        self.client = client or FirecrawlClient()
        self.agent = agent or ResearchAgent()

    def _scrape(self, url: str) -> str:
        result = self.client.scrape(url)
        if not result.success:
            raise ResearchError(f"Failed to scrape {url}: {result.error}")
        return result.markdown[: settings.research_content_chars]

    def _extract(self, prompt: str, schema: type, url: str) -> BaseModel:
        try:
            response = self.agent.complete_text(prompt, temperature=0.3)
        except ProviderError as e:
            raise ResearchError(f"Failed to analyze website {url}: {e}") from e

        match = re.search(r"\{[\s\S]*\}", response)
        try:
            return schema.model_validate(json.loads(match.group(0) if match else response))
        except (json.JSONDecodeError, ValidationError) as e:
            print(f"[research] Invalid extraction response for {url}: {response[:200]}")
            raise ResearchError("Invalid response format from AI model") from e

    def extract_company(self, url: str) -> CompanyInfo:
        """Extract the seller's company profile.

        Raises:
            ResearchError: On scrape failure or malformed LLM output
        """
        content = self._scrape(url)
        return self._extract(COMPANY_PROMPT.format(content=content), CompanyInfo, url)

    def extract_prospect(self, url: str) -> ProspectInfo:
        """Extract the prospect's organization profile.

        Raises:
            ResearchError: On scrape failure or malformed LLM output
        """
        content = self._scrape(url)
        return self._extract(PROSPECT_PROMPT.format(content=content), ProspectInfo, url)

    def generate_business_case(self, company: CompanyInfo, prospect: ProspectInfo) -> str:
        prompt = BUSINESS_CASE_PROMPT.format(
            seller=company.name,
            sub_industry=company.sub_industry,
            services=", ".join(company.services),
            buyer=prospect.name,
            org_type=prospect.org_type,
            industry=prospect.industry,
        )
        return self._complete(prompt, max_tokens=100)

    def generate_catalyst(self, business_case: str) -> str:
        return self._complete(CATALYST_PROMPT.format(business_case=business_case), max_tokens=80)

    def _complete(self, prompt: str, max_tokens: int) -> str:
        try:
            return self.agent.complete_text(prompt, max_tokens=max_tokens, temperature=0.7)
        except ProviderError as e:
            raise ResearchError(f"Business context generation failed: {e}") from e

    def analyze(self, your_url: str, prospect_url: str) -> BusinessContext:
        """Full analysis: both websites, business case, catalyst."""
        print("[research] Starting business context analysis...")
        company = self.extract_company(your_url)
        prospect = self.extract_prospect(prospect_url)
        print(f"[research] Extracted companies: {company.name} -> {prospect.name}")

        business_case = self.generate_business_case(company, prospect)
        catalyst = self.generate_catalyst(business_case)

        return BusinessContext(
            your_company=company,
            prospect=prospect,
            business_case=business_case,
            catalyst=catalyst,
        )
