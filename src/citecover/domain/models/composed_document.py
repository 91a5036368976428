from dataclasses import dataclass


@dataclass(frozen=True)
class ComposedDocument:
    """
    Cited PDF produced by composing a citation page with the original document.

    Fields:
        data: Serialized PDF bytes (unsaved rendition)
        page_count: Number of pages (original page count + 1)
        citation_page: 1-based position of the citation page
    """

    data: bytes
    page_count: int
    citation_page: int

    def __post_init__(self) -> None:
        """Validate composed document."""
        if not self.data:
            raise ValueError("data must be non-empty")
        if not 1 <= self.citation_page <= self.page_count:
            raise ValueError(
                f"citation_page must be within 1..{self.page_count}, got {self.citation_page}"
            )

    @property
    def length(self) -> int:
        return len(self.data)
