"""Section routes: parse, diff and rewrite documents sent in the request."""

from fastapi import APIRouter, Depends

from boardsync.api.config import get_settings
from boardsync.api.dependencies import get_metadata_provider, get_reconciler
from boardsync.api.schemas import (
    ApplyRequest,
    ApplyResponse,
    ParseRequest,
    ParseResponse,
    ReconcileRequest,
    ReconcileResponse,
    SectionResponse,
)
from boardsync.dsl.schema import AddSectionsOptions
from boardsync.engine.reconciler import SectionReconciler
from boardsync.errors import ValidationError
from boardsync.storage.metadata import MetadataProvider

router = APIRouter()


def _layout_name(request: ReconcileRequest, metadata: MetadataProvider) -> str:
    layout_name = request.layout_name or metadata.get_layout_name(request.text)
    if not layout_name:
        raise ValidationError("layout_name", None, "no layout given or declared in front matter")
    return layout_name


@router.post("/parse", response_model=ParseResponse)
async def parse(
    request: ParseRequest,
    reconciler: SectionReconciler = Depends(get_reconciler),
    metadata: MetadataProvider = Depends(get_metadata_provider),
):
    """Split a document into its sections."""
    sections = reconciler.parser.parse(request.text)
    return ParseResponse(
        sections=[
            SectionResponse(
                name=s.name,
                start_line=s.start_line,
                end_line=s.end_line,
                content=s.content,
            )
            for s in sections
        ],
        layout_name=metadata.get_layout_name(request.text),
    )


@router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile(
    request: ReconcileRequest,
    reconciler: SectionReconciler = Depends(get_reconciler),
    metadata: MetadataProvider = Depends(get_metadata_provider),
):
    """Diff a document against a layout."""
    result = reconciler.reconcile(request.text, _layout_name(request, metadata))
    return ReconcileResponse.from_result(result)


@router.post("/apply", response_model=ApplyResponse)
async def apply(
    request: ApplyRequest,
    reconciler: SectionReconciler = Depends(get_reconciler),
    metadata: MetadataProvider = Depends(get_metadata_provider),
):
    """Return the document with every missing section added."""
    layout_name = _layout_name(request, metadata)
    result = reconciler.reconcile(request.text, layout_name)
    if result.is_complete:
        content = request.text
    else:
        options = request.options or AddSectionsOptions(
            insert_position=get_settings().insert_position
        )
        content = reconciler.apply_missing_sections(request.text, layout_name, options)

    return ApplyResponse(
        layout_name=layout_name,
        content=content,
        sections_added=len(result.missing_sections),
        added_section_names=result.missing_sections,
        changed=not result.is_complete,
    )
