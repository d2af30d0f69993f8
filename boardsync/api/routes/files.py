"""File routes: analyze and rewrite documents under the document root."""

from fastapi import APIRouter, Depends, Query

from boardsync.api.config import get_settings
from boardsync.api.dependencies import get_board_service
from boardsync.api.schemas import (
    FileApplyRequest,
    FileApplyResponse,
    FileReport,
    MissingSectionsResponse,
    ReconcileResponse,
)
from boardsync.dsl.schema import AddSectionsOptions
from boardsync.services.board_service import BoardService

router = APIRouter()


@router.get("/missing", response_model=MissingSectionsResponse)
async def list_incomplete_files(service: BoardService = Depends(get_board_service)):
    """Documents whose declared layout has sections they lack."""
    incomplete = await service.find_files_with_missing_sections()
    return MissingSectionsResponse(
        files=[
            FileReport(path=path, result=ReconcileResponse.from_result(result))
            for path, result in incomplete
        ],
        total=len(incomplete),
    )


@router.get("/analyze", response_model=ReconcileResponse)
async def analyze_file(
    path: str = Query(..., description="Document path relative to the document root"),
    service: BoardService = Depends(get_board_service),
):
    """Diff a stored document against the layout it declares."""
    result = await service.analyze_file(path)
    return ReconcileResponse.from_result(result)


@router.post("/apply", response_model=FileApplyResponse)
async def apply_to_file(
    request: FileApplyRequest,
    service: BoardService = Depends(get_board_service),
):
    """Add the missing sections to a stored document and save it."""
    options = request.options or AddSectionsOptions(
        insert_position=get_settings().insert_position
    )
    result = await service.create_missing_sections(request.path, options)
    return FileApplyResponse(
        path=request.path,
        sections_added=result.sections_added,
        added_section_names=result.added_section_names,
        content=result.new_content,
        messages=result.messages,
    )
