# backend-fastapi/certimport/formats/pem.py
# PEM certificate decoding

import logging

from ..backend import CryptoBackend
from ..errors import DecodeFailure
from ..types import DecodedCertificate, ErrorKind

logger = logging.getLogger(__name__)

PEM_CERTIFICATE_MARKER = '-----BEGIN CERTIFICATE-----'


def has_pem_marker(text: str) -> bool:
    return PEM_CERTIFICATE_MARKER in text


def decode_pem_certificate(text: str, backend: CryptoBackend) -> DecodedCertificate:
    """
    Decode the first certificate block found in PEM text.

    Text without a certificate begin-marker is rejected without calling the
    backend.
    """
    logger.debug(f"=== PEM CERTIFICATE DECODE ===")
    logger.debug(f"Content string length: {len(text)} characters")

    if not isinstance(text, str) or not has_pem_marker(text):
        raise DecodeFailure("Invalid PEM format", kind=ErrorKind.INVALID_PEM, stage="invalid_pem")

    cert_blocks = text.count(PEM_CERTIFICATE_MARKER)
    if cert_blocks > 1:
        logger.info(f"Multiple certificates detected ({cert_blocks}), using the first block")

    try:
        cert = backend.certificate_from_pem(text)
    except Exception as pem_error:
        logger.warning(f"Error decoding PEM certificate: {pem_error}")
        raise DecodeFailure(f"Could not decode PEM certificate: {pem_error}",
                            kind=ErrorKind.INVALID_PEM, stage="pem") from pem_error

    logger.info("PEM certificate decoded")
    return cert
