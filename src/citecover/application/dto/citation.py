from pydantic import BaseModel


class CitationRequest(BaseModel):
    """Request DTO for the cited document use case."""

    bitstream_id: str
    is_admin: bool = False
    fallback_to_original: bool = True


class CitedDocumentResult(BaseModel):
    """Result DTO for the cited document use case."""

    data: bytes
    length: int
    cited: bool
    page_count: int | None = None
    duration_seconds: float
    warnings: list[str] = []
