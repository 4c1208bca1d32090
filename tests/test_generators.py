import json

import pytest

from idea_analysis.errors import GenerationError, MalformedOutputError
from idea_analysis.llm.client import LLMClient, is_retryable_status
from idea_analysis.sections.catalog import DEFAULT_SECTIONS, build_default_registry
from idea_analysis.sections.generators import (
    BUSINESS_FIELDS,
    PromptedSectionGenerator,
    extract_json,
    render_business_details,
)
from idea_analysis.sections import prompts
from idea_analysis.sections.schemas import ExecutiveSummaryData, VCActivityData

REQUIRED_DEFAULTS = [
    "executive_summary",
    "market_size_growth",
    "target_users",
    "competition",
    "unit_economics",
    "financial_projections",
]
RESEARCH_SECTIONS = {
    "market_size_growth",
    "competition",
    "unit_economics",
    "vc_activity",
    "vc_sentiment",
}


class FakeLLM:
    def __init__(self, reply: str = "{}", name: str = "fake"):
        self.name = name
        self.reply = reply
        self.prompts = []

    async def complete(self, prompt: str, *, max_tokens: int) -> str:
        self.prompts.append((prompt, max_tokens))
        return self.reply

    async def close(self) -> None:
        pass


SUMMARY_JSON = {
    "title": "Bookkeeping for restaurants",
    "verdict": "neutral",
    "score": 55,
    "summary": "Promising but crowded.",
    "key_findings": [{"type": "threat", "text": "Incumbent accounting suites"}],
}


def test_extract_json_plain_object():
    assert extract_json('{"a": 1}') == {"a": 1}


def test_extract_json_fenced_block():
    text = 'Here you go:\n```json\n{"a": {"b": [1, 2]}}\n```\nHope it helps.'
    assert extract_json(text) == {"a": {"b": [1, 2]}}


def test_extract_json_embedded_in_prose():
    text = 'Sure! The analysis is {"score": 40, "verdict": "negative"} as requested.'
    assert extract_json(text) == {"score": 40, "verdict": "negative"}


@pytest.mark.parametrize("text", ["", "no json here", "[1, 2, 3]", "{broken"])
def test_extract_json_rejects_non_objects(text):
    with pytest.raises(MalformedOutputError):
        extract_json(text)


def test_render_business_details_skips_empty_optionals(analysis_input):
    details = render_business_details(analysis_input.model_copy(update={"team_composition": ""}))

    assert "Description: A marketplace" in details
    assert "Sub-Industry: Accounting services" in details
    assert "Team:" not in details
    assert "Additional Info" not in details


@pytest.mark.anyio
async def test_generator_validates_reply(analysis_input):
    llm = FakeLLM(json.dumps(SUMMARY_JSON))
    generator = PromptedSectionGenerator(
        client=llm,
        prompt_template=prompts.EXECUTIVE_SUMMARY,
        output_model=ExecutiveSummaryData,
        max_tokens=1234,
    )

    data = await generator.generate(analysis_input)

    assert isinstance(data, ExecutiveSummaryData)
    assert data.score == 55
    assert data.key_findings[0].type == "threat"
    prompt, max_tokens = llm.prompts[0]
    assert max_tokens == 1234
    assert analysis_input.description in prompt


@pytest.mark.anyio
async def test_generator_unwraps_envelope_and_ignores_kind(analysis_input):
    reply = json.dumps({"vc_activity": {
        "kind": "something_else",
        "active_vcs": 8,
        "total_investment": "$120M",
        "average_deal_size": "$4M",
    }})
    generator = PromptedSectionGenerator(
        client=FakeLLM(reply),
        prompt_template=prompts.VC_ACTIVITY,
        output_model=VCActivityData,
        envelope="vc_activity",
    )

    data = await generator.generate(analysis_input)

    assert data.kind == "vc_activity"
    assert data.active_vcs == 8


@pytest.mark.anyio
async def test_generator_schema_mismatch_is_malformed(analysis_input):
    reply = json.dumps(dict(SUMMARY_JSON, score=250))
    generator = PromptedSectionGenerator(
        client=FakeLLM(reply),
        prompt_template=prompts.EXECUTIVE_SUMMARY,
        output_model=ExecutiveSummaryData,
    )

    with pytest.raises(MalformedOutputError) as exc_info:
        await generator.generate(analysis_input)

    assert not exc_info.value.transient
    assert exc_info.value.code == "malformed_output"


def test_generator_needs_business_fields():
    generator = PromptedSectionGenerator(
        client=FakeLLM(),
        prompt_template=prompts.EXECUTIVE_SUMMARY,
        output_model=ExecutiveSummaryData,
    )
    assert generator.input_fields == BUSINESS_FIELDS


def test_fake_llm_satisfies_protocol():
    assert isinstance(FakeLLM(), LLMClient)


def test_default_registry_layout():
    registry = build_default_registry(writer=FakeLLM(name="writer"))

    assert registry.frozen
    assert registry.section_ids() == [entry[0] for entry in DEFAULT_SECTIONS]
    assert len(registry) == 11
    assert registry.required_ids() == REQUIRED_DEFAULTS
    assert registry.required_input_fields() == BUSINESS_FIELDS


def test_default_registry_routes_research_sections():
    registry = build_default_registry(
        writer=FakeLLM(name="writer"),
        research=FakeLLM(name="research"),
    )

    for spec in registry:
        expected = "research" if spec.section_id in RESEARCH_SECTIONS else "writer"
        assert spec.description.endswith(f"generated by {expected}")


def test_default_registry_without_research_uses_writer():
    registry = build_default_registry(writer=FakeLLM(name="writer"))

    assert all(spec.description.endswith("generated by writer") for spec in registry)


def test_every_default_prompt_renders(analysis_input):
    registry = build_default_registry(writer=FakeLLM())

    for spec in registry:
        prompt = spec.generator.build_prompt(analysis_input)
        assert analysis_input.description in prompt
        assert "{business_details}" not in prompt


@pytest.mark.parametrize("status_code,retryable", [
    (400, False),
    (401, False),
    (404, False),
    (408, True),
    (429, True),
    (500, True),
    (529, True),
])
def test_retryable_status(status_code, retryable):
    assert is_retryable_status(status_code) is retryable


def test_generation_error_overrides():
    error = GenerationError("quota", code="provider_error", transient=True)
    assert error.code == "provider_error"
    assert error.transient
    assert GenerationError("x").code == "generation_failed"
