from dataclasses import dataclass, field

PDF_MIME_TYPES = frozenset({"application/pdf", "application/x-pdf"})
DISPLAY_BUNDLE_NAME = "DISPLAY"


@dataclass(frozen=True)
class CitationPolicy:
    """
    Read-only citation page configuration shared by all compose calls.

    enabled_collections already includes the collections of enabled communities.
    """

    template_path: str
    enable_globally: bool = False
    enabled_collections: frozenset[str] = field(default_factory=frozenset)
    citation_as_first_page: bool = True
    html_fields: frozenset[str] = field(default_factory=frozenset)
    valid_mime_types: frozenset[str] = PDF_MIME_TYPES

    def __post_init__(self) -> None:
        """Validate citation policy."""
        if not self.template_path.strip():
            raise ValueError("template_path must be non-empty")
        if not self.valid_mime_types:
            raise ValueError("valid_mime_types must contain at least one MIME type")
