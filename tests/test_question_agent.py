"""Tests for the Discovery Question Agent."""

import json

import pytest

from agents import DiscoveryQuestionAgent
from contracts import (
    DISCOVERY_AREA_PROMPTS,
    ICP_CONFIGS,
    ClientICP,
    DiscoveryNote,
    DiscoverySession,
    GenerationSource,
    QuestionBlock,
    SolutionScope,
)
from elicitation import DEFAULT_QUESTION, ElicitationDepthManager
from providers import ProviderError, RateLimiter

from conftest import FakeProvider


@pytest.fixture
def session():
    return DiscoverySession(
        account_name="Northwind Clinics",
        contact_name="Dana",
        contact_role="COO",
        client_icp=ClientICP.HEALTHCARE_MEDICAL,
        business_area="patient intake",
        discovery_context="HIPAA audit findings",
        solution_scope=SolutionScope.ENTERPRISE_INTEGRATION,
    )


def note(area, *answers):
    return DiscoveryNote(
        area_name=area,
        questions=[
            QuestionBlock(question_text=f"Q{i}?", question_number=i, notes=answer)
            for i, answer in enumerate(answers, start=1)
        ],
    )


def make_agent(*responses, max_requests=50):
    agent = DiscoveryQuestionAgent(rate_limiter=RateLimiter(max_requests=max_requests))
    agent.llm_provider = FakeProvider(*responses)
    return agent


class TestFallbackQuestions:
    """Template questions when the LLM is off."""

    def test_opening_question_for_universal_area(self, session):
        agent = DiscoveryQuestionAgent()
        result = agent.generate(session, "Pain Points & Challenges", [])

        assert result.source == GenerationSource.FALLBACK
        assert result.depth == 0
        assert result.should_continue is True
        assert result.guidance == ElicitationDepthManager.GUIDANCE_INITIAL
        assert result.question == (
            "What's the biggest operational challenge in your patient intake "
            "that relates to HIPAA audit findings?"
        )

    def test_opening_question_for_session_area(self, session):
        agent = DiscoveryQuestionAgent()
        result = agent.generate(session, "Current Technology Stack", [note("Current Technology Stack")])
        assert result.question == "What's your current technology stack?"

    def test_session_area_uses_initial_questions_by_depth(self, session):
        agent = DiscoveryQuestionAgent()
        notes = [note("Technical Requirements", "we run everything on premise")]
        result = agent.generate(session, "Technical Requirements", notes)
        assert result.depth == 1
        assert result.question == "What constraints do we need to work within?"

    def test_session_area_past_initial_questions(self, session):
        agent = DiscoveryQuestionAgent()
        notes = [note("Technical Requirements", "a", "b", "c")]
        result = agent.generate(session, "Technical Requirements", notes)
        assert result.question == DISCOVERY_AREA_PROMPTS["Technical Requirements"].follow_ups[0]

    def test_follow_ups_cycle_while_questioning_continues(self, session):
        agent = DiscoveryQuestionAgent()
        area = "Business Impact & Urgency"
        asked = []
        for depth in (3, 4):
            result = agent.generate(session, area, [note(area, *["the issue is blocked"] * depth)])
            assert result.should_continue is True
            asked.append(result.question)

        assert asked == [
            "What happens if this problem isn't solved in the next 6 months?",
            "How is this affecting your competitive position?",
        ]
        assert DEFAULT_QUESTION not in asked

    def test_technology_stack_uses_industry_questions(self, session):
        agent = DiscoveryQuestionAgent()
        area = "Current Technology Stack"
        questions = [
            agent.generate(session, area, [note(area, *["legacy EHR"] * depth)]).question
            for depth in (3, 4)
        ]
        assert questions == ICP_CONFIGS[ClientICP.HEALTHCARE_MEDICAL].questions[:2]

    def test_unfilled_template_uses_follow_up(self, session):
        agent = DiscoveryQuestionAgent()
        area = "Pain Points & Challenges"
        result = agent.generate(session, area, [note(area, "slow", "slow", "slow")])
        assert "[" not in result.question
        assert result.question == "How is this challenge impacting your business metrics?"

    def test_unknown_area_uses_generic_follow_ups(self, session):
        agent = DiscoveryQuestionAgent()
        result = agent.generate(session, "Vendor Landscape", [note("Vendor Landscape", "two vendors")])
        assert result.question == "Can you walk me through a recent example?"

    def test_solution_scope_placeholder(self, session):
        agent = DiscoveryQuestionAgent()
        notes = [note("Budget & Resources", "nobody has said")]
        result = agent.generate(session, "Budget & Resources", notes)
        assert result.question == (
            f"What budget range has been discussed for {SolutionScope.ENTERPRISE_INTEGRATION.value}?"
        )

    def test_icp_keyword_placeholder(self, session):
        agent = DiscoveryQuestionAgent()
        notes = [note("Constraints & Requirements", "we need audit logging on every record")]
        result = agent.generate(session, "Constraints & Requirements", notes)
        assert result.question == "How does audit logging on every record relate to HIPAA?"

    def test_reasoning_targets_first_missing_signal(self, session):
        agent = DiscoveryQuestionAgent()
        notes = [note("Pain Points & Challenges", "intake takes 3 days", "it is slow")]
        result = agent.generate(session, "Pain Points & Challenges", notes)
        assert "targeting technical details" in result.reasoning
        assert result.should_continue is False

    def test_depth_limit_stops_questioning(self, session):
        agent = DiscoveryQuestionAgent()
        notes = [note("Pain Points & Challenges", *["critical issue"] * 5)]
        result = agent.generate(session, "Pain Points & Challenges", notes)
        assert result.depth == 5
        assert result.should_continue is False


class TestLLMQuestions:
    """Questions written by the LLM, with fallback on failure."""

    def test_llm_question(self, session, live_llm):
        agent = make_agent(json.dumps({"question": "How many hours a week go to rework?", "reasoning": "quantify"}))
        notes = [note("Pain Points & Challenges", "intake forms get rekeyed")]

        result = agent.generate(session, "Pain Points & Challenges", notes)

        assert result.source == GenerationSource.LLM
        assert result.question == "How many hours a week go to rework?"
        assert result.reasoning == "quantify"
        assert result.depth == 1
        assert result.guidance == ElicitationDepthManager.GUIDANCE_QUANTIFY
        assert agent.total_usage.total_tokens == 150

        call = agent.llm_provider.calls[0]
        assert call["json_mode"] is True
        assert "QUESTION DEPTH: 1 (Foundation)" in call["user_message"]
        assert "intake forms get rekeyed" in call["user_message"]
        assert "Quantification present: No" in call["user_message"]
        assert "OUTPUT FORMAT" in call["system_prompt"]

    def test_code_fenced_json_is_accepted(self, session, live_llm):
        agent = make_agent('```json\n{"question": "Who signs off?"}\n```')
        result = agent.generate(session, "Decision Process & Timeline", [])
        assert result.question == "Who signs off?"

    def test_other_area_context_in_prompt(self, session, live_llm):
        agent = make_agent('{"question": "Next?"}')
        notes = [note("Budget & Resources", "budget is $200k"), note("Success Metrics")]
        agent.generate(session, "Success Metrics", notes)
        assert "Budget & Resources: Key insight - budget is $200k" in agent.llm_provider.calls[0]["user_message"]

    def test_invalid_output_retries_then_falls_back(self, session, live_llm):
        agent = make_agent("not json", '{"question": ""}')
        result = agent.generate(session, "Pain Points & Challenges", [])
        assert result.source == GenerationSource.FALLBACK
        assert len(agent.llm_provider.calls) == 2
        assert "PREVIOUS ERROR" in agent.llm_provider.calls[1]["user_message"]

    def test_provider_error_falls_back(self, session, live_llm):
        agent = make_agent(ProviderError("boom", code=ProviderError.API_ERROR))
        result = agent.generate(session, "Pain Points & Challenges", [])
        assert result.source == GenerationSource.FALLBACK

    def test_rate_limit_falls_back(self, session, live_llm):
        agent = make_agent('{"question": "One?"}', '{"question": "Two?"}', max_requests=1)
        assert agent.generate(session, "Success Metrics", []).source == GenerationSource.LLM
        result = agent.generate(session, "Success Metrics", [])
        assert result.source == GenerationSource.FALLBACK
        assert len(agent.llm_provider.calls) == 1

    def test_mock_mode_skips_provider(self, session):
        agent = make_agent('{"question": "unused"}')
        result = agent.generate(session, "Success Metrics", [])
        assert result.source == GenerationSource.FALLBACK
        assert agent.llm_provider.calls == []
