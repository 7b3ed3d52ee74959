# backend-fastapi/certimport/__init__.py
# Certificate import pipeline: container detection, decoding and prefill extraction

from .backend import CryptoBackend, CryptographyBackend, default_backend
from .errors import (
    CertificateImportError, DecodeFailure, ExtractionFailure,
    FileTooLargeError, GatingError, UnsupportedFormatError
)
from .pipeline import ParsePipeline, PipelineConfig, make_certificate_file
from .types import (
    AttributeKind, AwaitingPassword, CertificateFile, ContainerKind,
    DecodedCertificate, ErrorKind, ExtractionResult, OutcomeStatus,
    ParseOutcome, SelectedFile, SubjectAttribute
)

__all__ = [
    'ParsePipeline',
    'PipelineConfig',
    'make_certificate_file',
    'CryptoBackend',
    'CryptographyBackend',
    'default_backend',
    'CertificateImportError',
    'GatingError',
    'UnsupportedFormatError',
    'FileTooLargeError',
    'DecodeFailure',
    'ExtractionFailure',
    'AttributeKind',
    'AwaitingPassword',
    'CertificateFile',
    'ContainerKind',
    'DecodedCertificate',
    'ErrorKind',
    'ExtractionResult',
    'OutcomeStatus',
    'ParseOutcome',
    'SelectedFile',
    'SubjectAttribute',
]
