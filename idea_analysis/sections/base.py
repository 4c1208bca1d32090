"""Section generator interface and registry entry type."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple

from idea_analysis.jobs.models import AnalysisInput


# Every generator needs at least the idea description.
DEFAULT_INPUT_FIELDS: Tuple[str, ...] = ("description",)


class SectionGenerator(ABC):
    """Produces one section's data from the job input.

    To add a section:
    1. Add its data model to sections/schemas.py (and to the SectionData union)
    2. Implement generate() here or reuse PromptedSectionGenerator
    3. Register a SectionSpec for it at startup

    generate() raises GenerationError subclasses for expected failures;
    the Section Runner decides about retries from the error's `transient` flag.
    """

    #: AnalysisInput fields that must be non-blank for this generator.
    input_fields: Tuple[str, ...] = DEFAULT_INPUT_FIELDS

    @abstractmethod
    async def generate(self, analysis_input: AnalysisInput):
        """Return the section data model instance."""
        ...


@dataclass(frozen=True)
class SectionSpec:
    """One registry entry."""
    section_id: str
    title: str
    required: bool
    generator: SectionGenerator
    description: str = ""
