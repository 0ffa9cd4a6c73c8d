from taskwiki.schemas.schemas import (
    OKResponse,
    PageSave, PageResponse, PageSummary,
    RenderRequest, RenderResponse,
    PAGE_NAME_PATTERN,
)

__all__ = [
    "OKResponse",
    "PageSave", "PageResponse", "PageSummary",
    "RenderRequest", "RenderResponse",
    "PAGE_NAME_PATTERN",
]
