# backend-fastapi/certimport/formats/pkcs12.py
# PKCS12 / PFX bundle decoding with a single password retry

import logging
from typing import List, Optional, Union

from ..backend import CryptoBackend
from ..errors import DecodeFailure
from ..types import AwaitingPassword, DecodedCertificate, ErrorKind

logger = logging.getLogger(__name__)

EMPTY_PASSWORD = ""


def open_bundle(file_content: bytes, filename: str,
                backend: CryptoBackend) -> Union[DecodedCertificate, AwaitingPassword]:
    """
    First phase of PKCS12 decoding.

    Parses the DER structure and tries the empty password. Returns the
    selected certificate on success, or an AwaitingPassword token when the
    bundle needs a password. DER errors are fatal.
    """
    logger.info(f"=== PKCS12 DECODE ===")
    logger.debug(f"File content length: {len(file_content)} bytes")
    logger.debug(f"Filename: {filename}")

    if len(file_content) >= 4:
        header = file_content[:4]
        logger.debug(f"PKCS12 header analysis: {bytes(header).hex()}")
        if header[0] != 0x30:
            logger.warning(f"Unexpected PKCS12 header: expected 0x30, got 0x{header[0]:02x}")

    try:
        structure = backend.parse_der(file_content)
    except Exception as asn1_error:
        logger.warning(f"PKCS12 content is not valid DER: {asn1_error}")
        raise DecodeFailure(f"Could not parse ASN.1 structure: {asn1_error}",
                            kind=ErrorKind.ASN1_DECODE_FAILURE, stage="asn1") from asn1_error

    try:
        certificates = backend.unpack_pkcs12(structure, EMPTY_PASSWORD)
    except Exception as unpack_error:
        logger.info(f"PKCS12 bundle did not open with an empty password: {unpack_error}")
        return AwaitingPassword(filename=filename, structure=structure)

    logger.info("PKCS12 bundle loaded without password")
    return select_certificate(certificates)


def resume_bundle(pending: AwaitingPassword, password: Optional[str],
                  backend: CryptoBackend) -> DecodedCertificate:
    """
    Second and last phase: retry the unpack once with the supplied password.
    A missing answer counts as the empty password.
    """
    logger.info(f"=== PKCS12 DECODE (resumed) ===")
    logger.debug(f"Filename: {pending.filename}")
    logger.debug(f"Password provided: {'YES' if password else 'NO'}")

    try:
        certificates = backend.unpack_pkcs12(pending.structure, password or EMPTY_PASSWORD)
    except Exception as unpack_error:
        logger.warning(f"PKCS12 unpack failed with supplied password: {unpack_error}")
        raise DecodeFailure("Could not unpack PKCS12 bundle",
                            kind=ErrorKind.BUNDLE_UNPACK_FAILURE, stage="bundle",
                            attempts=2) from unpack_error

    logger.info("PKCS12 bundle loaded with supplied password")
    return select_certificate(certificates)


def select_certificate(certificates: List[DecodedCertificate]) -> DecodedCertificate:
    """First certificate bag wins; chain members are not disambiguated"""
    if not certificates:
        raise DecodeFailure("No certificate found in PKCS12 bundle",
                            kind=ErrorKind.NO_CERTIFICATE_IN_BUNDLE, stage="no_certificates")

    if len(certificates) > 1:
        logger.debug(f"{len(certificates)} certificate bags found, using the first")
    return certificates[0]
