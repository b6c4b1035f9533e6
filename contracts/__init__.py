"""Pydantic contracts for DeepRabbit Discovery.

All handoffs between the elicitation core, agents and orchestrator are typed
through these contracts.
"""

from .elicitation_contracts import (
    QualityLevel,
    NoteQuality,
    CompletenessReport,
)

from .discovery_contracts import (
    ClientICP,
    SolutionScope,
    NextStepGoal,
    SessionStatus,
    DiscoveryAreaName,
    DISCOVERY_AREAS,
    AreaPrompt,
    DISCOVERY_AREA_PROMPTS,
    ICPConfig,
    ICP_CONFIGS,
    DiscoverySession,
    QuestionBlock,
    DiscoveryNote,
    AreaProgress,
    ProgressTracking,
)

from .report_contracts import (
    GenerationSource,
    QuestionDraft,
    DiscoveryQuestionResult,
    ReportSection,
    ReportSections,
    ReportDraft,
    GenerationMetadata,
    GeneratedReport,
)

from .research_contracts import (
    ScrapeResult,
    WebsiteContext,
    CompanyInfo,
    ProspectInfo,
    BusinessContext,
    ConversationMetadata,
    GeneratedConversation,
)

__all__ = [
    # Elicitation
    "QualityLevel",
    "NoteQuality",
    "CompletenessReport",
    # Discovery
    "ClientICP",
    "SolutionScope",
    "NextStepGoal",
    "SessionStatus",
    "DiscoveryAreaName",
    "DISCOVERY_AREAS",
    "AreaPrompt",
    "DISCOVERY_AREA_PROMPTS",
    "ICPConfig",
    "ICP_CONFIGS",
    "DiscoverySession",
    "QuestionBlock",
    "DiscoveryNote",
    "AreaProgress",
    "ProgressTracking",
    # Reports
    "GenerationSource",
    "QuestionDraft",
    "DiscoveryQuestionResult",
    "ReportSection",
    "ReportSections",
    "ReportDraft",
    "GenerationMetadata",
    "GeneratedReport",
    # Research
    "ScrapeResult",
    "WebsiteContext",
    "CompanyInfo",
    "ProspectInfo",
    "BusinessContext",
    "ConversationMetadata",
    "GeneratedConversation",
]
