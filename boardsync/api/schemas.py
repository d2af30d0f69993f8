"""Pydantic request/response schemas for the API."""

from typing import Any

from pydantic import BaseModel, Field

from boardsync.dsl.schema import AddSectionsOptions, LayoutInfo, ReconciliationResult


class BlockResponse(BaseModel):
    """One block of a layout."""
    title: str
    x: int
    y: int
    w: int
    h: int


class LayoutSummary(BaseModel):
    """Layout listing entry."""
    name: str
    display_name: str
    description: str
    category: str
    sections: list[str]
    block_count: int

    @classmethod
    def from_info(cls, info: LayoutInfo) -> "LayoutSummary":
        return cls(**info.model_dump())


class LayoutListResponse(BaseModel):
    """All registered layouts."""
    layouts: list[LayoutSummary]
    total: int
    rejected: list[str] = Field(default_factory=list)


class LayoutDetailResponse(LayoutSummary):
    """A layout with its blocks."""
    blocks: list[BlockResponse]


class ValidateLayoutRequest(BaseModel):
    """Request to validate a candidate layout."""
    blocks: list[dict[str, Any]] = Field(..., description="Blocks as {title, x, y, w, h}")


class ViolationResponse(BaseModel):
    """One geometry violation."""
    rule: str
    message: str
    block_index: int
    block_title: str | None = None
    conflicting_title: str | None = None
    cell: list[int] | None = None


class ValidateLayoutResponse(BaseModel):
    """Validation outcome."""
    valid: bool
    violations: list[ViolationResponse]


class ParseRequest(BaseModel):
    """Request to parse a document."""
    text: str


class SectionResponse(BaseModel):
    """A parsed section."""
    name: str
    start_line: int
    end_line: int
    content: str


class ParseResponse(BaseModel):
    """Parsed sections, in document order."""
    sections: list[SectionResponse]
    layout_name: str | None = None


class ReconcileRequest(BaseModel):
    """Request to diff a document against a layout."""
    text: str
    layout_name: str | None = Field(
        default=None,
        description="Layout to check against; read from front matter when omitted",
    )


class ReconcileResponse(BaseModel):
    """Section diff."""
    layout_name: str
    existing_sections: list[str]
    missing_sections: list[str]
    extra_sections: list[str]
    correct_order: list[str]
    duplicate_sections: list[str]
    is_complete: bool

    @classmethod
    def from_result(cls, result: ReconciliationResult) -> "ReconcileResponse":
        return cls(
            layout_name=result.layout_name,
            existing_sections=result.existing_section_names,
            missing_sections=result.missing_sections,
            extra_sections=result.extra_sections,
            correct_order=result.correct_order,
            duplicate_sections=result.duplicate_sections,
            is_complete=result.is_complete,
        )


class ApplyRequest(ReconcileRequest):
    """Request to add missing sections to a document."""
    options: AddSectionsOptions | None = Field(
        default=None,
        description="Rewrite options; the configured insert position is used when omitted",
    )


class ApplyResponse(BaseModel):
    """Rewritten document."""
    layout_name: str
    content: str
    sections_added: int
    added_section_names: list[str]
    changed: bool


class FileReport(BaseModel):
    """Section diff of a stored document."""
    path: str
    result: ReconcileResponse


class MissingSectionsResponse(BaseModel):
    """Stored documents that lack sections."""
    files: list[FileReport]
    total: int


class FileApplyRequest(BaseModel):
    """Request to add missing sections to a stored document."""
    path: str = Field(..., description="Document path relative to the document root")
    options: AddSectionsOptions | None = Field(
        default=None,
        description="Rewrite options; the configured insert position is used when omitted",
    )


class FileApplyResponse(BaseModel):
    """Outcome of rewriting a stored document."""
    path: str
    sections_added: int
    added_section_names: list[str]
    content: str
    messages: list[str]
