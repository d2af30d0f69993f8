"""Layout routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from boardsync.api.dependencies import get_registry
from boardsync.api.schemas import (
    BlockResponse,
    LayoutDetailResponse,
    LayoutListResponse,
    LayoutSummary,
    ValidateLayoutRequest,
    ValidateLayoutResponse,
    ViolationResponse,
)
from boardsync.constraints.engine import validate_layout
from boardsync.templates.registry import LayoutRegistry

router = APIRouter()


@router.get("", response_model=LayoutListResponse)
async def list_layouts(
    category: str | None = None,
    registry: LayoutRegistry = Depends(get_registry),
):
    """List registered layouts."""
    infos = registry.list_metadata()
    if category:
        infos = [info for info in infos if info.category == category]

    return LayoutListResponse(
        layouts=[LayoutSummary.from_info(info) for info in infos],
        total=len(infos),
        rejected=sorted(registry.diagnostics),
    )


@router.get("/{name}", response_model=LayoutDetailResponse)
async def get_layout(
    name: str,
    registry: LayoutRegistry = Depends(get_registry),
):
    """Get a layout with its blocks."""
    layout = registry.get(name)
    if layout is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f'Layout "{name}" not found',
        )

    info = registry.get_metadata(name)
    return LayoutDetailResponse(
        **info.model_dump(),
        blocks=[BlockResponse(**block.model_dump()) for block in layout.blocks],
    )


@router.post("/validate", response_model=ValidateLayoutResponse)
async def validate(request: ValidateLayoutRequest):
    """Validate candidate blocks against the grid rules."""
    result = validate_layout(request.blocks)
    return ValidateLayoutResponse(
        valid=result.valid,
        violations=[ViolationResponse(**v.to_dict()) for v in result.violations],
    )
