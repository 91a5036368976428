"""Domain errors for citation document composition."""


class CitationDocumentError(Exception):
    """
    Base class for errors that abort composition of a cited document.

    Callers are expected to catch this and serve the original document unchanged.
    """


class EncryptedDocument(CitationDocumentError):
    """
    Raised when the original document is encrypted and cannot be composed.

    Attributes:
        handle: Handle of the item the document belongs to (optional)
    """

    def __init__(self, handle: str | None = None) -> None:
        self.handle = handle
        msg = "Could not add citation page to an encrypted PDF"
        if handle:
            msg += f". Item handle: {handle}"
        super().__init__(msg)


class MissingTemplate(CitationDocumentError):
    """
    Raised when the cover page template file cannot be found.

    Attributes:
        template_path: Configured template path that did not resolve
        hint: Actionable hint for resolution
    """

    def __init__(self, template_path: str, hint: str | None = None) -> None:
        self.template_path = template_path
        self.hint = hint
        msg = f"Could not find cover page template file using path {template_path}"
        if hint:
            msg += f". {hint}"
        super().__init__(msg)


class CompositionIOError(CitationDocumentError):
    """
    Raised when reading, parsing or serializing a PDF fails during composition.

    Attributes:
        message: Error message
        reason: Detailed reason for failure (optional)
    """

    def __init__(self, message: str, reason: str | None = None) -> None:
        self.message = message
        self.reason = reason
        super().__init__(f"{message}: {reason}" if reason else message)


class TemplateConsumed(RuntimeError):
    """Raised when a populated template is used again after it was flattened."""

    def __init__(self, template_path: str) -> None:
        self.template_path = template_path
        super().__init__(
            f"Template '{template_path}' was already flattened; load it again to populate new values"
        )


class FieldResolutionFailure(Exception):
    """
    Raised when a single form field cannot be resolved (non-blocking).

    Never aborts composition: the resolver logs it and leaves the field unset.

    Attributes:
        field_name: Form field or metadata key that failed
        reason: Why resolution failed
    """

    def __init__(self, field_name: str, reason: str) -> None:
        self.field_name = field_name
        self.reason = reason
        super().__init__(f"Error in processing field '{field_name}': {reason}")


class InvalidMetadataKey(FieldResolutionFailure):
    """
    Raised when a metadata key is not in schema.element[.qualifier] format.

    Attributes:
        key: The malformed key
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key, "expected schema.element or schema.element.qualifier")


class ItemNotFound(Exception):
    """
    Raised when an item or bitstream cannot be found in the metadata repository.

    Attributes:
        handle: Missing identifier
        hint: Actionable hint for resolution
    """

    def __init__(self, handle: str, hint: str | None = None) -> None:
        self.handle = handle
        self.hint = hint
        msg = f"Item not found: {handle}"
        if hint:
            msg += f". {hint}"
        super().__init__(msg)
