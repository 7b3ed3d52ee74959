# backend-fastapi/certimport/extractors/metadata.py
# Prefill metadata extraction from a decoded certificate

import datetime
import logging
from typing import Optional

from ..errors import ExtractionFailure
from ..types import AttributeKind, DecodedCertificate, ExtractionResult

logger = logging.getLogger(__name__)

DEFAULT_NOTES_TEMPLATE = "Imported from {filename}"


def find_subject_value(cert: DecodedCertificate, kind: AttributeKind) -> Optional[str]:
    """Value of the first subject attribute of the given kind, as stored"""
    for attribute in cert.subject:
        if attribute.kind == kind:
            return attribute.value
    return None


def get_identity_hint(cert: DecodedCertificate) -> Optional[str]:
    """
    Common name, falling back to organization name only when the subject
    has no common name at all. An empty common name is returned as is.
    """
    common_name = find_subject_value(cert, AttributeKind.COMMON_NAME)
    if common_name is not None:
        return common_name

    organization = find_subject_value(cert, AttributeKind.ORGANIZATION_NAME)
    if organization is not None:
        logger.debug("No common name in subject, using organization name")
    return organization


def strip_extension(filename: str) -> str:
    """Drop the last extension: 'cert.v2.pem' -> 'cert.v2'"""
    stem, dot, extension = filename.rpartition('.')
    if not dot or not stem or not extension or '/' in extension:
        return filename
    return stem


def expiry_date(not_after: datetime.datetime) -> datetime.date:
    """Calendar date of not-after in local time"""
    if not_after.tzinfo is None:
        not_after = not_after.replace(tzinfo=datetime.timezone.utc)
    return not_after.astimezone().date()


def extract_prefill_metadata(cert: DecodedCertificate, filename: str,
                             notes_template: str = DEFAULT_NOTES_TEMPLATE) -> ExtractionResult:
    """Build the form prefill fields for a decoded certificate"""
    logger.info(f"=== PREFILL METADATA EXTRACTION ===")

    try:
        identity = get_identity_hint(cert)
        suggested_name = identity or strip_extension(filename)
        expiry = expiry_date(cert.not_after)
        notes = notes_template.format(filename=filename)
    except Exception as e:
        logger.error(f"Could not interpret certificate for prefill: {e}")
        raise ExtractionFailure(f"Could not interpret certificate: {e}", stage="extract") from e

    logger.debug(f"Identity hint: {identity if identity else 'NONE (using filename)'}")
    logger.debug(f"Not after: {cert.not_after.isoformat()} -> {expiry.isoformat()}")

    return ExtractionResult(
        suggested_name=suggested_name,
        expiry_date=expiry,
        source_filename=filename,
        notes=notes,
    )
