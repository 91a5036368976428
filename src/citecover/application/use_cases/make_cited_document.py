from __future__ import annotations

import logging
import time

from ...infrastructure.logging import get_correlation_id, set_correlation_id
from ...domain.errors import CitationDocumentError
from ...domain.policy.citation_policy import CitationPolicy
from ..dto.citation import CitationRequest, CitedDocumentResult
from ..ports.content_store import ContentStorePort
from ..ports.metadata_repository import MetadataRepositoryPort
from ..ports.page_composer import PageComposerPort
from ..services.eligibility import CitationEligibility, RequestContext

logger = logging.getLogger(__name__)


def make_cited_document(
    request: CitationRequest,
    repository: MetadataRepositoryPort,
    content_store: ContentStorePort,
    composer: PageComposerPort,
    policy: CitationPolicy,
    eligibility: CitationEligibility | None = None,
    correlation_id: str | None = None,
) -> CitedDocumentResult:
    """
    Produce the rendition served for a stored document: lookup → eligibility → retrieve → compose.

    Args:
        request: CitationRequest with bitstream_id, is_admin, fallback_to_original
        repository: MetadataRepositoryPort for bitstream/item lookup
        content_store: ContentStorePort for reading the original bytes
        composer: PageComposerPort for building the cited PDF
        policy: CitationPolicy snapshot (template path, first/last page, rules)
        eligibility: Optional CitationEligibility (built from policy if not provided)
        correlation_id: Optional correlation ID (generated if not provided)

    Returns:
        CitedDocumentResult; cited=False when the original is returned unchanged

    Raises:
        ItemNotFound: If the bitstream or its item does not exist
        CitationDocumentError: If composition fails and fallback_to_original is False
    """
    start_time = time.time()
    if correlation_id:
        set_correlation_id(correlation_id)
    else:
        correlation_id = get_correlation_id()
    eligibility = eligibility or CitationEligibility(policy, repository)
    warnings: list[str] = []

    bitstream = repository.get_bitstream(request.bitstream_id)
    item = repository.get_item(bitstream.item_handle)
    original = content_store.retrieve(bitstream)

    if not eligibility.is_eligible(bitstream, RequestContext(is_admin=request.is_admin)):
        logger.info(
            f"Citation page not applicable for bitstream '{bitstream.id}', serving original",
            extra={"correlation_id": correlation_id, "bitstream_id": bitstream.id},
        )
        return CitedDocumentResult(
            data=original,
            length=len(original),
            cited=False,
            duration_seconds=time.time() - start_time,
        )

    logger.info(
        f"Composing cited document for bitstream '{bitstream.id}' (item {item.handle})",
        extra={
            "correlation_id": correlation_id,
            "bitstream_id": bitstream.id,
            "item_handle": item.handle,
            "template_path": policy.template_path,
        },
    )

    try:
        composed = composer.compose(
            original,
            item,
            policy.template_path,
            insert_first=policy.citation_as_first_page,
        )
    except CitationDocumentError as e:
        if not request.fallback_to_original:
            raise
        warning_msg = f"Citation page could not be added, serving original: {e}"
        warnings.append(warning_msg)
        logger.warning(warning_msg, extra={"correlation_id": correlation_id, "bitstream_id": bitstream.id})
        return CitedDocumentResult(
            data=original,
            length=len(original),
            cited=False,
            duration_seconds=time.time() - start_time,
            warnings=warnings,
        )

    duration = time.time() - start_time
    logger.info(
        f"Cited document ready: {composed.page_count} pages, {composed.length} bytes in {duration:.2f}s",
        extra={"correlation_id": correlation_id, "bitstream_id": bitstream.id},
    )
    return CitedDocumentResult(
        data=composed.data,
        length=composed.length,
        cited=True,
        page_count=composed.page_count,
        duration_seconds=duration,
        warnings=warnings,
    )
