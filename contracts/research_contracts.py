"""Research contracts: scraped website context and business-case analysis."""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class ScrapeResult(BaseModel):
    """Outcome of a single Firecrawl scrape."""
    success: bool
    markdown: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)
    error: Optional[str] = None


class WebsiteContext(BaseModel):
    """Business context pulled from a company website without an LLM."""
    company_name: str
    description: str = ""
    services: List[str] = Field(default_factory=list)
    industries: List[str] = Field(default_factory=list)
    content: str = ""


class CompanyInfo(BaseModel):
    """The consultant's own company, extracted from its website."""
    name: str
    sub_industry: str = Field(..., description="Precise sub-industry, e.g. 'civil engineering'")
    services: List[str] = Field(default_factory=list)
    typical_clients: List[str] = Field(default_factory=list)


class ProspectInfo(BaseModel):
    """The prospect organization, extracted from its website."""
    name: str
    org_type: str = Field(..., description="company, government, nonprofit, ...")
    industry: str
    current_needs: List[str] = Field(default_factory=list)


class BusinessContext(BaseModel):
    """Why the consultant and the prospect are talking right now."""
    your_company: CompanyInfo
    prospect: ProspectInfo
    business_case: str
    catalyst: str


class ConversationMetadata(BaseModel):
    prospect_company: Optional[str] = None
    prospect_industry: Optional[str] = None
    key_pain_point: Optional[str] = None
    business_case: Optional[str] = None
    catalyst: Optional[str] = None


class GeneratedConversation(BaseModel):
    """A short sample pain-point conversation used to demo the tool."""
    pre_history_context: str
    question_1: str
    prospect_response: str
    question_2: str
    metadata: ConversationMetadata = Field(default_factory=ConversationMetadata)
