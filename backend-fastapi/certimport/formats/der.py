# backend-fastapi/certimport/formats/der.py
# DER certificate decoding with PEM fallback for ambiguous .cer files

import logging

from ..backend import CryptoBackend
from ..errors import DecodeFailure
from ..types import DecodedCertificate, ErrorKind
from .pem import decode_pem_certificate, has_pem_marker

logger = logging.getLogger(__name__)


def decode_der_certificate(file_content: bytes, backend: CryptoBackend) -> DecodedCertificate:
    """Decode a standalone DER certificate"""
    logger.debug(f"File content length: {len(file_content)} bytes")
    logger.debug(f"First 16 bytes (hex): {bytes(file_content[:16]).hex()}")

    structure = backend.parse_der(file_content)
    return backend.certificate_from_asn1(structure)


def decode_single_certificate(file_content: bytes, backend: CryptoBackend) -> DecodedCertificate:
    """
    Decode a .cer file: DER first, PEM only when DER fails and the bytes
    carry a certificate begin-marker. Without the marker the DER error is
    reported as is.
    """
    logger.info(f"=== SINGLE CERTIFICATE DECODE ===")

    try:
        cert = decode_der_certificate(file_content, backend)
        logger.info("Successfully decoded as DER certificate")
        return cert
    except Exception as der_error:
        logger.debug(f"DER certificate decoding failed: {der_error}")

        text = bytes(file_content).decode('utf-8', errors='replace')
        if not has_pem_marker(text):
            logger.warning(f"No PEM marker in .cer content, header: {bytes(file_content[:32]).hex()}")
            raise DecodeFailure(f"Could not decode DER certificate: {der_error}",
                                kind=ErrorKind.DER_DECODE_FAILURE, stage="der") from der_error

    logger.debug("PEM marker found, retrying as PEM text")
    return decode_pem_certificate(text, backend)
