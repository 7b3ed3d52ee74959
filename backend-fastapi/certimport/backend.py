# backend-fastapi/certimport/backend.py
# Cryptographic primitives used by the decoders, behind an injectable interface

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol

from asn1crypto import core
from cryptography import x509
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

from .types import AttributeKind, DecodedCertificate, SubjectAttribute

logger = logging.getLogger(__name__)

logger.debug("certimport/backend.py initialized")


@dataclass(frozen=True)
class Asn1Structure:
    """A DER blob that has been confirmed to be a well-formed ASN.1 value"""
    der: bytes = field(repr=False)
    value: Any = field(default=None, repr=False, compare=False)


class CryptoBackend(Protocol):
    """
    The four decoding operations the pipeline relies on.

    Every method raises on malformed input; the decoders translate those
    errors into the pipeline's own failure kinds.
    """

    def parse_der(self, data: bytes) -> Asn1Structure:
        ...

    def unpack_pkcs12(self, structure: Asn1Structure, password: str) -> List[DecodedCertificate]:
        ...

    def certificate_from_asn1(self, structure: Asn1Structure) -> DecodedCertificate:
        ...

    def certificate_from_pem(self, text: str) -> DecodedCertificate:
        ...


_ATTRIBUTE_KINDS = {
    NameOID.COMMON_NAME: AttributeKind.COMMON_NAME,
    NameOID.ORGANIZATION_NAME: AttributeKind.ORGANIZATION_NAME,
}


def _attribute_name(attribute: x509.NameAttribute) -> str:
    name = getattr(attribute.oid, "_name", None)
    if not name or name == "Unknown OID":
        return attribute.oid.dotted_string
    return name


def _attribute_value(attribute: x509.NameAttribute) -> str:
    value = attribute.value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def to_decoded_certificate(cert: x509.Certificate) -> DecodedCertificate:
    """Reduce a cryptography certificate to the fields the extractor reads"""
    subject = []
    for i, attribute in enumerate(cert.subject):
        kind = _ATTRIBUTE_KINDS.get(attribute.oid, AttributeKind.OTHER)
        item = SubjectAttribute(
            kind=kind,
            name=_attribute_name(attribute),
            short_name=attribute.rfc4514_attribute_name,
            value=_attribute_value(attribute),
        )
        logger.debug(f"  Subject attribute [{i}]: {item.short_name} ({kind.value}) = {item.value}")
        subject.append(item)

    return DecodedCertificate(
        subject=tuple(subject),
        not_before=cert.not_valid_before_utc,
        not_after=cert.not_valid_after_utc,
    )


class CryptographyBackend:
    """Default backend: asn1crypto for DER structure, cryptography for the rest"""

    def parse_der(self, data: bytes) -> Asn1Structure:
        logger.debug(f"Parsing {len(data)} bytes as DER ASN.1")
        value = core.load(bytes(data), strict=True)
        logger.debug(f"ASN.1 root value: {type(value).__name__}")
        return Asn1Structure(der=bytes(data), value=value)

    def unpack_pkcs12(self, structure: Asn1Structure, password: str) -> List[DecodedCertificate]:
        password_bytes: Optional[bytes] = password.encode("utf-8") if password else None
        bundle = pkcs12.load_pkcs12(structure.der, password_bytes)

        # Main certificate first, then the remaining certificate bags
        bags = []
        if bundle.cert is not None:
            bags.append(bundle.cert.certificate)
        bags.extend(item.certificate for item in bundle.additional_certs)

        logger.debug(f"PKCS12 unpacked: {len(bags)} certificate bag(s), key present: {'YES' if bundle.key else 'NO'}")
        return [to_decoded_certificate(cert) for cert in bags]

    def certificate_from_asn1(self, structure: Asn1Structure) -> DecodedCertificate:
        cert = x509.load_der_x509_certificate(structure.der)
        return to_decoded_certificate(cert)

    def certificate_from_pem(self, text: str) -> DecodedCertificate:
        cert = x509.load_pem_x509_certificate(text.encode("utf-8"))
        return to_decoded_certificate(cert)


default_backend = CryptographyBackend()
