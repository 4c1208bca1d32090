"""Ordered, freeze-after-startup registry of report sections."""

import logging
from collections import OrderedDict
from typing import Iterator, List, Optional, Tuple

from idea_analysis.sections.base import SectionSpec

logger = logging.getLogger(__name__)


class SectionRegistry:
    """Holds the SectionSpec entries every new job is created with.

    - Insertion order is report order
    - Entries are registered during startup, then the registry is frozen
    - Section ids are unique
    """

    def __init__(self):
        self._specs: "OrderedDict[str, SectionSpec]" = OrderedDict()
        self._frozen = False

    def register(self, spec: SectionSpec) -> None:
        if self._frozen:
            raise RuntimeError(
                f"Cannot register section '{spec.section_id}': registry is frozen"
            )
        if spec.section_id in self._specs:
            raise ValueError(f"Section '{spec.section_id}' is already registered")
        self._specs[spec.section_id] = spec
        logger.debug(
            "Registered section: %s (%s)",
            spec.section_id,
            "required" if spec.required else "optional",
        )

    def freeze(self) -> "SectionRegistry":
        if not self._specs:
            raise RuntimeError("Cannot freeze an empty section registry")
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, section_id: str) -> Optional[SectionSpec]:
        return self._specs.get(section_id)

    def list_sections(self, required: Optional[bool] = None) -> List[SectionSpec]:
        """List registered sections, optionally filtered by required flag."""
        specs = list(self._specs.values())
        if required is not None:
            specs = [s for s in specs if s.required == required]
        return specs

    def section_ids(self) -> List[str]:
        return list(self._specs.keys())

    def required_ids(self) -> List[str]:
        return [s.section_id for s in self._specs.values() if s.required]

    def required_input_fields(self) -> Tuple[str, ...]:
        """Union of the input fields every registered generator needs."""
        fields: List[str] = []
        for spec in self._specs.values():
            for name in spec.generator.input_fields:
                if name not in fields:
                    fields.append(name)
        return tuple(fields)

    def __iter__(self) -> Iterator[SectionSpec]:
        return iter(list(self._specs.values()))

    def __len__(self) -> int:
        return len(self._specs)
