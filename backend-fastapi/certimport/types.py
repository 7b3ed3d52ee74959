# backend-fastapi/certimport/types.py
# Shared type definitions for the certificate import pipeline

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Tuple, Union


class ContainerKind(Enum):
    """Encoding family expected for an uploaded file"""
    BINARY_BUNDLE = "BinaryBundle"          # PKCS#12 / PFX
    BINARY_SINGLE_CERT = "BinarySingleCert"  # DER, sometimes PEM in disguise
    PEM = "Pem"


class AttributeKind(Enum):
    """Subject attribute classification assigned while decoding"""
    COMMON_NAME = "CommonName"
    ORGANIZATION_NAME = "OrganizationName"
    OTHER = "Other"


class ErrorKind(Enum):
    """Internal failure taxonomy, preserved for logging and tests"""
    UNSUPPORTED_FORMAT = "UnsupportedFormat"
    FILE_TOO_LARGE = "FileTooLarge"
    ASN1_DECODE_FAILURE = "Asn1DecodeFailure"
    BUNDLE_UNPACK_FAILURE = "BundleUnpackFailure"
    NO_CERTIFICATE_IN_BUNDLE = "NoCertificateInBundle"
    DER_DECODE_FAILURE = "DerDecodeFailure"
    INVALID_PEM = "InvalidPem"
    EXTRACTION_FAILURE = "ExtractionFailure"


class OutcomeStatus(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    AWAITING_PASSWORD = "awaiting_password"


@dataclass(frozen=True)
class SelectedFile:
    """
    A file handed over by the file-selection collaborator before its content
    has been read. Gating only looks at filename and size.
    """
    filename: str
    size: int
    read: Callable[[], Union[bytes, str]]


@dataclass(frozen=True)
class CertificateFile:
    """Immutable input for a single parse attempt"""
    content: Union[bytes, str]
    filename: str
    extension: str


@dataclass(frozen=True)
class SubjectAttribute:
    kind: AttributeKind
    name: str
    short_name: str
    value: str


@dataclass(frozen=True)
class DecodedCertificate:
    """Decoded certificate reduced to what the extractor needs"""
    subject: Tuple[SubjectAttribute, ...]
    not_before: datetime.datetime
    not_after: datetime.datetime


@dataclass(frozen=True)
class ExtractionResult:
    """Fields used to prefill the form"""
    suggested_name: str
    expiry_date: datetime.date
    source_filename: str
    notes: str

    @property
    def expiry_date_text(self) -> str:
        """Expiry as YYYY-MM-DD, suitable for a date input"""
        return (
            f"{self.expiry_date.year:04d}-"
            f"{self.expiry_date.month:02d}-"
            f"{self.expiry_date.day:02d}"
        )

    def to_dict(self) -> dict:
        return {
            "suggestedName": self.suggested_name,
            "expiryDate": self.expiry_date_text,
            "notes": self.notes,
            "sourceFilename": self.source_filename,
        }


@dataclass(frozen=True)
class AwaitingPassword:
    """
    Resumption token for a PKCS#12 bundle whose empty-password unpack failed.

    The caller holds it while asking for a password and hands it back to
    ParsePipeline.resume(). The already-parsed ASN.1 structure is kept so the
    bytes are not decoded twice.
    """
    filename: str
    structure: Any = field(repr=False)


@dataclass(frozen=True)
class ParseOutcome:
    """Tagged result of one parse invocation"""
    status: OutcomeStatus
    result: Optional[ExtractionResult] = None
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None
    detail: Optional[str] = None
    pending: Optional[AwaitingPassword] = None

    def __post_init__(self):
        populated = [
            self.result is not None,
            self.error_kind is not None,
            self.pending is not None,
        ]
        if sum(populated) != 1:
            raise ValueError("ParseOutcome must carry exactly one of result, error_kind or pending")

    @classmethod
    def success(cls, result: ExtractionResult) -> "ParseOutcome":
        return cls(status=OutcomeStatus.SUCCESS, result=result)

    @classmethod
    def failure(cls, error_kind: ErrorKind, message: str, detail: Optional[str] = None) -> "ParseOutcome":
        return cls(status=OutcomeStatus.FAILURE, error_kind=error_kind, message=message, detail=detail)

    @classmethod
    def awaiting_password(cls, pending: AwaitingPassword) -> "ParseOutcome":
        return cls(status=OutcomeStatus.AWAITING_PASSWORD, pending=pending)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @property
    def requires_password(self) -> bool:
        return self.status == OutcomeStatus.AWAITING_PASSWORD
