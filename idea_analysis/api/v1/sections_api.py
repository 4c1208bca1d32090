"""Sections API: list the report sections every new analysis runs."""

from typing import Optional

from fastapi import APIRouter, Depends

from idea_analysis.api.deps import get_orchestrator
from idea_analysis.orchestration.orchestrator import Orchestrator

router = APIRouter()


@router.get("/sections")
async def list_sections(
    required: Optional[bool] = None,
    orchestrator: Orchestrator = Depends(get_orchestrator),
):
    """List registered sections in report order, optionally filtered."""
    specs = orchestrator.registry.list_sections(required=required)
    return {
        "sections": [
            {
                "section_id": s.section_id,
                "title": s.title,
                "required": s.required,
                "description": s.description,
            }
            for s in specs
        ],
        "count": len(specs),
        "required_input_fields": list(orchestrator.registry.required_input_fields()),
    }
