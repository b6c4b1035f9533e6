"""Tests for the demo Conversation Agent."""

import pytest

from agents import ConversationAgent
from agents.conversation_agent import FOLLOW_UP_FALLBACK
from contracts import BusinessContext, CompanyInfo, ProspectInfo
from providers import ProviderError, RateLimiter

from conftest import FakeProvider


@pytest.fixture
def business_context():
    return BusinessContext(
        your_company=CompanyInfo(
            name="Stonebridge Engineering",
            sub_industry="civil engineering",
            services=["bridge inspection", "structural analysis"],
        ),
        prospect=ProspectInfo(name="County Roads Dept", org_type="government", industry="public works"),
        business_case="Stonebridge helping County Roads with bridge inspection for aging overpasses",
        catalyst="New State Inspection Mandate",
    )


def make_agent(*responses):
    agent = ConversationAgent(rate_limiter=RateLimiter(max_requests=50))
    agent.llm_provider = FakeProvider(*responses)
    return agent


class TestGenerate:

    def test_fallback_when_llm_off(self, business_context):
        conversation = ConversationAgent().generate(business_context)
        assert conversation.pre_history_context == (
            "Discussing new state inspection mandate and its impact on County Roads Dept"
        )
        assert "public works operations at County Roads Dept" in conversation.question_1
        assert conversation.metadata.key_pain_point == "operational bottlenecks"
        assert conversation.metadata.catalyst == "New State Inspection Mandate"

    def test_parses_structured_response(self, business_context, live_llm):
        agent = make_agent(
            "CONTEXT: The mandate lands in March.\n"
            "Q1: Where does inspection scheduling break down?\n"
            "RESPONSE: We lose 2 weeks per cycle chasing paper forms.\n"
            "Q2: How many bridges slip past their window each year?\n"
        )
        conversation = agent.generate(business_context)

        assert conversation.pre_history_context == "The mandate lands in March."
        assert conversation.question_1 == "Where does inspection scheduling break down?"
        assert conversation.prospect_response == "We lose 2 weeks per cycle chasing paper forms."
        assert conversation.question_2 == "How many bridges slip past their window each year?"
        assert conversation.metadata.key_pain_point == "operational efficiency"
        assert agent.llm_provider.calls[0]["json_mode"] is False

    def test_unstructured_response_split_into_sentences(self, business_context, live_llm):
        agent = make_agent(
            "How are inspections scheduled today. "
            "Our crews double-book every spring. "
            "What does a missed inspection cost you."
        )
        conversation = agent.generate(business_context)
        assert conversation.question_1 == "How are inspections scheduled today?"
        assert conversation.prospect_response == "Our crews double-book every spring."
        assert conversation.question_2 == "What does a missed inspection cost you?"
        assert conversation.pre_history_context == "Discussing new state inspection mandate"

    def test_short_response_gets_defaults(self, business_context, live_llm):
        agent = make_agent("Q1: Only one line?")
        conversation = agent.generate(business_context)
        assert conversation.question_1 == "Only one line?"
        assert conversation.question_2 == "Can you walk me through the specific impact this is having?"

    def test_provider_error_falls_back(self, business_context, live_llm):
        agent = make_agent(ProviderError("down", code=ProviderError.SERVICE_UNAVAILABLE))
        conversation = agent.generate(business_context)
        assert conversation.metadata.key_pain_point == "operational bottlenecks"


class TestFollowUp:

    def test_follow_up_uses_last_prospect_message(self, business_context, live_llm):
        agent = make_agent("  How often does that happen?  ")
        history = [
            {"role": "assistant", "content": "Q1"},
            {"role": "prospect", "content": "first answer"},
            {"role": "prospect", "content": "paper forms get lost"},
        ]
        assert agent.follow_up(history, business_context) == "How often does that happen?"
        call = agent.llm_provider.calls[0]
        assert 'Last prospect response: "paper forms get lost"' in call["user_message"]
        assert call["max_tokens"] == 150

    def test_follow_up_fallback_on_error(self, business_context, live_llm):
        agent = make_agent(ProviderError("down"))
        assert agent.follow_up([], business_context) == FOLLOW_UP_FALLBACK

    def test_follow_up_fallback_when_llm_off(self, business_context):
        assert ConversationAgent().follow_up([], business_context) == FOLLOW_UP_FALLBACK
