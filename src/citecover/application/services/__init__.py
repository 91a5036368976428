"""Application services for orchestrating domain logic."""

from .eligibility import CitationEligibility, RequestContext, expand_enabled_collections
from .field_value_resolver import FieldValueResolver

__all__ = [
    "CitationEligibility",
    "FieldValueResolver",
    "RequestContext",
    "expand_enabled_collections",
]
