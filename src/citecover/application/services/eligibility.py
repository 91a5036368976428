"""Application service deciding whether a stored document gets a citation page."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ..ports.metadata_repository import MetadataRepositoryPort
from ...domain.models.item import Bitstream
from ...domain.policy.citation_policy import DISPLAY_BUNDLE_NAME, CitationPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Per-request facts the eligibility rules need from the caller."""

    is_admin: bool = False


def expand_enabled_collections(
    collections: Iterable[str],
    communities: Iterable[str],
    repository: MetadataRepositoryPort,
) -> frozenset[str]:
    """
    Combine enabled collection handles with all collections under enabled communities.

    Sub-communities are followed transitively. Unknown community handles are logged
    and skipped.

    Args:
        collections: Explicitly enabled collection handles
        communities: Enabled community handles
        repository: Repository used to resolve the community tree

    Returns:
        Frozen set of enabled collection handles
    """
    enabled = {handle.strip() for handle in collections if handle.strip()}
    seen: set[str] = set()
    pending = [handle.strip() for handle in communities if handle.strip()]

    while pending:
        handle = pending.pop()
        if handle in seen:
            continue
        seen.add(handle)
        community = repository.get_community(handle)
        if community is None:
            logger.error(
                f"Invalid community for citation_page.enabled_communities, value: {handle}",
                extra={"community_handle": handle},
            )
            continue
        enabled.update(community.collections)
        pending.extend(community.subcommunities)

    return frozenset(enabled)


class CitationEligibility:
    """Applies the citation page rules to a stored document."""

    def __init__(self, policy: CitationPolicy, repository: MetadataRepositoryPort) -> None:
        self.policy = policy
        self.repository = repository

    def is_enabled_through_collection(self, bitstream: Bitstream) -> bool:
        # Reject quickly if no enabled collections
        if not self.policy.enabled_collections:
            return False
        item = self.repository.get_item(bitstream.item_handle)
        return any(
            collection.handle in self.policy.enabled_collections
            for collection in item.collections
        )

    def can_generate_citation_version(self, bitstream: Bitstream) -> bool:
        return bitstream.mime_type in self.policy.valid_mime_types

    def is_eligible(self, bitstream: Bitstream, context: RequestContext) -> bool:
        """
        Decide whether the citation version should be served instead of the original.

        Args:
            bitstream: Stored document being requested
            context: Request context (admin users always get the original)

        Returns:
            True if a cited document should be generated
        """
        if not (self.policy.enable_globally or self.is_enabled_through_collection(bitstream)):
            return False

        # Bitstreams in the DISPLAY bundle already carry a citation page
        if DISPLAY_BUNDLE_NAME in bitstream.bundles:
            return False

        if context.is_admin:
            return False

        return self.can_generate_citation_version(bitstream)
