"""Discovery session contracts: sessions, areas, question blocks and progress."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ClientICP(str, Enum):
    """Ideal customer profile (industry) of the prospect."""
    AEROSPACE_DEFENSE = "Aerospace/Defense"
    HEALTHCARE_MEDICAL = "Healthcare/Medical"
    AUTOMOTIVE = "Automotive"
    IOT_INDUSTRIAL = "IoT/Industrial"
    CONSTRUCTION = "Construction"
    PRECISION_AGRICULTURE = "Precision Agriculture"
    FINANCIAL_SERVICES = "Financial Services"
    EDUCATION_TECHNOLOGY = "Education Technology"


class SolutionScope(str, Enum):
    """Expected size of the engagement."""
    CONSULTATION = "Software consultation ($10K-$50K)"
    CUSTOM_DEVELOPMENT = "Custom development project ($50K-$200K)"
    ENTERPRISE_INTEGRATION = "Enterprise system integration ($200K-$1M+)"
    PARTNERSHIP = "Long-term development partnership ($1M+)"


class NextStepGoal(str, Enum):
    """What the consultant wants out of the session."""
    TECHNICAL_DEEP_DIVE = "Technical deep-dive meeting"
    ARCHITECTURE_ASSESSMENT = "Architecture assessment"
    PROPOSAL_DEVELOPMENT = "Proposal development"
    PROOF_OF_CONCEPT = "Proof of concept discussion"


class SessionStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class DiscoveryAreaName(str, Enum):
    """The eight areas walked through in a discovery session."""
    CURRENT_TECHNOLOGY_STACK = "Current Technology Stack"
    PAIN_POINTS = "Pain Points & Challenges"
    BUSINESS_IMPACT = "Business Impact & Urgency"
    DECISION_PROCESS = "Decision Process & Timeline"
    BUDGET_RESOURCES = "Budget & Resource Allocation"
    TECHNICAL_REQUIREMENTS = "Technical Requirements"
    INTEGRATION_INFRASTRUCTURE = "Integration & Infrastructure"
    SUCCESS_METRICS = "Success Metrics & Outcomes"


DISCOVERY_AREAS: List[str] = [area.value for area in DiscoveryAreaName]


class AreaPrompt(BaseModel):
    description: str
    initial_questions: List[str]
    follow_ups: List[str] = Field(default_factory=list)


DISCOVERY_AREA_PROMPTS: Dict[str, AreaPrompt] = {
    DiscoveryAreaName.CURRENT_TECHNOLOGY_STACK.value: AreaPrompt(
        description="Understand their existing systems, languages, frameworks, and infrastructure",
        initial_questions=[
            "What's your current technology stack?",
            "What programming languages and frameworks are you using?",
            "How is your infrastructure currently set up?",
        ],
        follow_ups=[
            "How do these systems integrate with each other?",
            "What are the main pain points with your current technology?",
            "How much time does your team spend on manual processes?",
        ],
    ),
    DiscoveryAreaName.PAIN_POINTS.value: AreaPrompt(
        description="Identify technical and business challenges they face",
        initial_questions=[
            "What are your biggest technical challenges right now?",
            "Where are the bottlenecks in your current system?",
            "What problems keep coming up repeatedly?",
        ],
        follow_ups=[
            "How is this challenge impacting your business metrics?",
            "What workarounds are you currently using?",
            "How much is this costing you in terms of time and resources?",
        ],
    ),
    DiscoveryAreaName.BUSINESS_IMPACT.value: AreaPrompt(
        description="Quantify the business impact and timeline pressures",
        initial_questions=[
            "How is this impacting your business today?",
            "What happens if nothing changes?",
            "What's driving the urgency for a solution?",
        ],
        follow_ups=[
            "What happens if this problem isn't solved in the next 6 months?",
            "How is this affecting your competitive position?",
            "What's the opportunity cost of not addressing this now?",
        ],
    ),
    DiscoveryAreaName.DECISION_PROCESS.value: AreaPrompt(
        description="Map out their decision-making process and timeline",
        initial_questions=[
            "What's your decision-making process for this project?",
            "Who needs to be involved in the decision?",
            "What timeline are you working with?",
        ],
        follow_ups=[
            "Who has the final sign-off, and what do they care about most?",
            "What could delay a decision on this?",
            "How have similar purchases been approved in the past?",
        ],
    ),
    DiscoveryAreaName.BUDGET_RESOURCES.value: AreaPrompt(
        description="Understand budget constraints and resource availability",
        initial_questions=[
            "What budget range have you allocated for this initiative?",
            "How are you thinking about ROI for this investment?",
            "What resources do you have available internally?",
        ],
        follow_ups=[
            "How does this initiative compare to other funding priorities?",
            "Who controls budget approval for this?",
            "What would justify a larger investment?",
        ],
    ),
    DiscoveryAreaName.TECHNICAL_REQUIREMENTS.value: AreaPrompt(
        description="Gather specific technical requirements and constraints",
        initial_questions=[
            "What are your must-have technical requirements?",
            "What constraints do we need to work within?",
            "What are your performance and scalability needs?",
        ],
        follow_ups=[
            "Which of these requirements is hardest to meet today?",
            "What security or compliance rules apply to this system?",
            "What load or data volume do you expect in a year?",
        ],
    ),
    DiscoveryAreaName.INTEGRATION_INFRASTRUCTURE.value: AreaPrompt(
        description="Understand integration needs and infrastructure requirements",
        initial_questions=[
            "What systems will this need to integrate with?",
            "What are your deployment preferences?",
            "How do you handle DevOps and CI/CD currently?",
        ],
        follow_ups=[
            "Which integration causes the most trouble today?",
            "Where does data get copied by hand between systems?",
            "Who owns the infrastructure this would run on?",
        ],
    ),
    DiscoveryAreaName.SUCCESS_METRICS.value: AreaPrompt(
        description="Define what success looks like and how it will be measured",
        initial_questions=[
            "How will you measure success for this project?",
            "What outcomes are you expecting?",
            "What KPIs will this impact?",
        ],
        follow_ups=[
            "What is the baseline for that metric today?",
            "Who reports on these numbers, and how often?",
            "What would make this a failure even if the targets were hit?",
        ],
    ),
}


class ICPConfig(BaseModel):
    description: str
    keywords: List[str]
    questions: List[str] = Field(default_factory=list)


ICP_CONFIGS: Dict[ClientICP, ICPConfig] = {
    ClientICP.AEROSPACE_DEFENSE: ICPConfig(
        description="Flight systems, defense contracts, regulatory (FAA)",
        keywords=["DO-178", "RTCA", "FAA", "safety-critical", "avionics", "defense"],
        questions=[
            "What certification requirements (DO-178, RTCA) apply to your systems?",
            "How do you currently manage configuration and version control?",
            "What's your approach to safety-critical system validation?",
        ],
    ),
    ClientICP.HEALTHCARE_MEDICAL: ICPConfig(
        description="Medical devices, healthcare IT, clinical systems",
        keywords=["HIPAA", "FDA", "HL7", "FHIR", "clinical", "patient data"],
        questions=[
            "What compliance requirements (HIPAA, FDA, SOX) impact your current systems?",
            "How do you currently handle patient data integration across systems?",
            "What's your experience with clinical workflow automation?",
        ],
    ),
    ClientICP.AUTOMOTIVE: ICPConfig(
        description="Connected vehicles, autonomous systems, supply chain",
        keywords=["AUTOSAR", "ISO 26262", "V2X", "autonomous", "telematics"],
        questions=[
            "How are you approaching vehicle connectivity and data management?",
            "What functional safety standards (ISO 26262) do you need to meet?",
            "What's your strategy for supply chain visibility and management?",
        ],
    ),
    ClientICP.IOT_INDUSTRIAL: ICPConfig(
        description="Smart manufacturing, sensor networks, edge computing",
        keywords=["MQTT", "OPC UA", "edge computing", "predictive maintenance", "SCADA"],
        questions=[
            "What protocols do your devices currently use for communication?",
            "How do you handle edge computing vs cloud processing decisions?",
            "What's your strategy for device lifecycle management?",
        ],
    ),
    ClientICP.CONSTRUCTION: ICPConfig(
        description="Equipment management, project tracking, safety systems",
        keywords=["BIM", "project management", "equipment tracking", "safety compliance"],
        questions=[
            "How do you currently track equipment and resource utilization?",
            "What safety compliance and reporting requirements do you have?",
            "What's your approach to project collaboration across sites?",
        ],
    ),
    ClientICP.PRECISION_AGRICULTURE: ICPConfig(
        description="Farm automation, crop monitoring, supply chain",
        keywords=["precision farming", "IoT sensors", "yield optimization", "supply chain"],
        questions=[
            "What types of sensors and data collection are you using in the field?",
            "How are you analyzing yield and optimization data?",
            "What's your strategy for integrating with existing farm management systems?",
        ],
    ),
    ClientICP.FINANCIAL_SERVICES: ICPConfig(
        description="Fintech, payment systems, trading platforms",
        keywords=["PCI DSS", "SOX", "real-time processing", "fraud detection", "APIs"],
        questions=[
            "What regulatory compliance requirements (PCI DSS, SOX) do you face?",
            "How do you handle real-time transaction processing and reconciliation?",
            "What's your approach to fraud detection and security?",
        ],
    ),
    ClientICP.EDUCATION_TECHNOLOGY: ICPConfig(
        description="Learning platforms, assessment tools, student systems",
        keywords=["LMS", "FERPA", "assessment", "adaptive learning", "analytics"],
        questions=[
            "How do you handle student data privacy (FERPA) requirements?",
            "What existing learning management systems do you need to integrate with?",
            "What's your approach to learning analytics and outcomes measurement?",
        ],
    ),
}


class DiscoverySession(BaseModel):
    """Pre-knowledge captured before the discovery conversation starts."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    account_name: str
    contact_name: str = ""
    contact_role: str = ""
    client_icp: ClientICP
    business_area: str = Field(..., description="Part of the business under discussion")
    discovery_context: str = Field(..., description="The catalyst for the conversation")
    solution_scope: SolutionScope = SolutionScope.CUSTOM_DEVELOPMENT
    next_step_goal: NextStepGoal = NextStepGoal.TECHNICAL_DEEP_DIVE
    status: SessionStatus = SessionStatus.IN_PROGRESS
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class QuestionBlock(BaseModel):
    """One question asked in an area and the notes taken on the answer."""
    question_text: str
    question_number: int = Field(..., ge=1)
    notes: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)


class DiscoveryNote(BaseModel):
    """Ordered question/answer exchanges for a single area."""
    area_name: str
    questions: List[QuestionBlock] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=datetime.now)

    @property
    def depth(self) -> int:
        return len(self.questions)

    @property
    def note_texts(self) -> List[str]:
        return [q.notes for q in self.questions]


class AreaProgress(BaseModel):
    questions_asked: int = 0
    has_notes: bool = False
    last_updated: Optional[datetime] = None


class ProgressTracking(BaseModel):
    """Question counts per area against the two-per-area target."""
    total_assessments: int
    completed_assessments: int
    area_breakdown: Dict[str, AreaProgress] = Field(default_factory=dict)
    is_complete: bool = False
