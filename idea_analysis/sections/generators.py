"""LLM-backed section generators."""

import json
import logging
import re
from typing import Any, Dict, Optional, Tuple, Type

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from idea_analysis.errors import MalformedOutputError
from idea_analysis.jobs.models import AnalysisInput
from idea_analysis.llm.client import LLMClient
from idea_analysis.sections.base import SectionGenerator

logger = logging.getLogger(__name__)

# Fields the standard business-details block of every prompt interpolates.
BUSINESS_FIELDS: Tuple[str, ...] = (
    "description",
    "industry",
    "target_customers",
    "pricing_model",
    "current_stage",
)

_FENCED_JSON = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)


def extract_json(text: str) -> Dict[str, Any]:
    """Pull a JSON object out of an LLM reply.

    Tries, in order: a fenced ```json block, the whole reply, the span
    between the first '{' and the last '}'.
    """
    candidates = []
    fenced = _FENCED_JSON.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    candidates.append(text)
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start:end + 1])

    for candidate in candidates:
        try:
            parsed = json.loads(candidate.strip())
        except ValueError:
            continue
        if isinstance(parsed, dict):
            return parsed

    raise MalformedOutputError("No JSON object found in provider response")


def render_business_details(analysis_input: AnalysisInput) -> str:
    lines = [
        f"Description: {analysis_input.description}",
        f"Industry: {analysis_input.industry}",
    ]
    if analysis_input.sub_industry:
        lines.append(f"Sub-Industry: {analysis_input.sub_industry}")
    lines += [
        f"Target Customers: {analysis_input.target_customers}",
        f"Pricing Model: {analysis_input.pricing_model}",
        f"Current Stage: {analysis_input.current_stage}",
    ]
    if analysis_input.team_composition:
        lines.append(f"Team: {analysis_input.team_composition}")
    if analysis_input.additional_info:
        lines.append(f"Additional Info: {analysis_input.additional_info}")
    return "\n".join(lines)


class PromptedSectionGenerator(SectionGenerator):
    """Renders a prompt, asks an LLM for JSON, validates it into `output_model`.

    `envelope` names an optional top-level key the model tends to wrap its
    answer in (e.g. {"vc_activity": {...}}); it is unwrapped when present.
    """

    def __init__(
        self,
        client: LLMClient,
        prompt_template: str,
        output_model: Type[BaseModel],
        max_tokens: int = 4000,
        envelope: Optional[str] = None,
        input_fields: Tuple[str, ...] = BUSINESS_FIELDS,
    ):
        self._client = client
        self._prompt_template = prompt_template
        self._output_model = output_model
        self._max_tokens = max_tokens
        self._envelope = envelope
        self.input_fields = input_fields

    @property
    def output_model(self) -> Type[BaseModel]:
        return self._output_model

    def build_prompt(self, analysis_input: AnalysisInput) -> str:
        return self._prompt_template.format(
            business_details=render_business_details(analysis_input),
            **analysis_input.model_dump(),
        )

    async def generate(self, analysis_input: AnalysisInput):
        prompt = self.build_prompt(analysis_input)
        reply = await self._client.complete(prompt, max_tokens=self._max_tokens)
        payload = extract_json(reply)

        if self._envelope and isinstance(payload.get(self._envelope), dict):
            payload = payload[self._envelope]
        # The tag is ours, not the model's.
        payload.pop("kind", None)

        try:
            return self._output_model.model_validate(payload)
        except SchemaValidationError as e:
            logger.warning(
                "%s: provider output failed validation (%d errors)",
                self._output_model.__name__,
                e.error_count(),
            )
            raise MalformedOutputError(
                f"Provider output does not match {self._output_model.__name__}: "
                f"{e.errors()[0]['loc']} {e.errors()[0]['msg']}"
            ) from e
