# backend-fastapi/certimport/errors.py
# Exception hierarchy for the certificate import pipeline

from typing import Optional

from .types import ErrorKind


class CertificateImportError(Exception):
    """Base exception for certificate import operations"""

    kind: ErrorKind = ErrorKind.EXTRACTION_FAILURE

    def __init__(self, message: str, kind: Optional[ErrorKind] = None,
                 stage: Optional[str] = None, attempts: int = 0):
        super().__init__(message)
        if kind is not None:
            self.kind = kind
        self.stage = stage
        self.attempts = attempts

    @property
    def detail(self) -> str:
        parts = [str(self)]
        if self.stage:
            parts.append(f"stage={self.stage}")
        if self.attempts:
            parts.append(f"attempts={self.attempts}")
        return "; ".join(parts)


class GatingError(CertificateImportError):
    """Raised before any content is read"""
    pass


class UnsupportedFormatError(GatingError):
    """Raised when the file extension is not accepted"""
    kind = ErrorKind.UNSUPPORTED_FORMAT


class FileTooLargeError(GatingError):
    """Raised when the reported file size exceeds the ceiling"""
    kind = ErrorKind.FILE_TOO_LARGE


class DecodeFailure(CertificateImportError):
    """Raised when a container cannot be decoded into a certificate"""
    pass


class ExtractionFailure(CertificateImportError):
    """Raised when a decoded certificate cannot be interpreted"""
    kind = ErrorKind.EXTRACTION_FAILURE
