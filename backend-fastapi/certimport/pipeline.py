# backend-fastapi/certimport/pipeline.py
# Gate -> classify -> decode -> extract, with every failure turned into a ParseOutcome

import logging
import traceback
from dataclasses import dataclass
from typing import Optional, Union

from .backend import CryptoBackend, default_backend
from .errors import CertificateImportError, FileTooLargeError, GatingError, UnsupportedFormatError
from .extractors.metadata import DEFAULT_NOTES_TEMPLATE, extract_prefill_metadata
from .formats.classifier import classify, classify_extension, get_extension, is_supported, reads_as_text
from .formats.der import decode_single_certificate
from .formats.pem import decode_pem_certificate
from .formats.pkcs12 import open_bundle, resume_bundle
from .types import (
    AwaitingPassword, CertificateFile, ContainerKind, DecodedCertificate,
    ErrorKind, ParseOutcome, SelectedFile
)

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 5 * 1024 * 1024

GENERIC_FAILURE_MESSAGE = "Couldn't read this certificate. You can still enter details manually."
UNSUPPORTED_FORMAT_MESSAGE = "Unsupported file type. Please use .p12, .pfx, .pem, .crt or .cer files."
FILE_TOO_LARGE_MESSAGE = "File too large to parse."


@dataclass(frozen=True)
class PipelineConfig:
    """Limits and user-facing texts for a ParsePipeline"""
    max_file_size: int = MAX_FILE_SIZE
    notes_template: str = DEFAULT_NOTES_TEMPLATE
    generic_failure_message: str = GENERIC_FAILURE_MESSAGE
    unsupported_format_message: str = UNSUPPORTED_FORMAT_MESSAGE
    file_too_large_message: str = FILE_TOO_LARGE_MESSAGE

    def message_for(self, kind: ErrorKind) -> str:
        if kind == ErrorKind.UNSUPPORTED_FORMAT:
            return self.unsupported_format_message
        if kind == ErrorKind.FILE_TOO_LARGE:
            return self.file_too_large_message
        return self.generic_failure_message


def make_certificate_file(filename: str, content: Union[bytes, str]) -> CertificateFile:
    return CertificateFile(content=content, filename=filename, extension=get_extension(filename))


class ParsePipeline:
    """
    Stateless orchestrator for one certificate file at a time.

    parse() returns SUCCESS, FAILURE or AWAITING_PASSWORD. In the last case
    the caller obtains a password and calls resume() with the pending token;
    resume() never asks for a password again.
    """

    def __init__(self, backend: Optional[CryptoBackend] = None, config: Optional[PipelineConfig] = None):
        self.backend = backend or default_backend
        self.config = config or PipelineConfig()

    def gate(self, filename: str, size: int) -> ContainerKind:
        """Reject unsupported or oversized files before any content is read"""
        if not is_supported(filename):
            raise UnsupportedFormatError(f"Unsupported file extension: '{get_extension(filename)}'",
                                         stage="gate")
        if size > self.config.max_file_size:
            raise FileTooLargeError(f"File size {size} exceeds {self.config.max_file_size} bytes",
                                    stage="gate")
        return classify(filename)

    def process(self, selected: SelectedFile) -> ParseOutcome:
        """Gate, read and parse a file coming from the file-selection collaborator"""
        logger.debug(f"=== CERTIFICATE IMPORT START ===")
        logger.debug(f"File: {selected.filename}")
        logger.debug(f"Size: {selected.size} bytes")

        try:
            self.gate(selected.filename, selected.size)
        except GatingError as gate_error:
            return self._failure(gate_error, selected.filename)

        content = selected.read()
        return self.parse(make_certificate_file(selected.filename, content))

    def parse(self, certificate_file: CertificateFile) -> ParseOutcome:
        filename = certificate_file.filename
        try:
            kind = classify_extension(certificate_file.extension)
            logger.debug(f"Container classification: {filename} -> {kind.value}")
            decoded = self._decode(kind, certificate_file)
            if isinstance(decoded, AwaitingPassword):
                logger.info(f"Password required for {filename}")
                return ParseOutcome.awaiting_password(decoded)
            return self._finish(decoded, filename)
        except CertificateImportError as import_error:
            return self._failure(import_error, filename)
        except Exception as e:
            return self._unexpected(e, filename)

    def resume(self, pending: AwaitingPassword, password: Optional[str]) -> ParseOutcome:
        """Complete a bundle decode that was waiting for a password"""
        filename = pending.filename
        try:
            decoded = resume_bundle(pending, password, self.backend)
            return self._finish(decoded, filename)
        except CertificateImportError as import_error:
            return self._failure(import_error, filename)
        except Exception as e:
            return self._unexpected(e, filename)

    def _decode(self, kind: ContainerKind,
                certificate_file: CertificateFile) -> Union[DecodedCertificate, AwaitingPassword]:
        content = self._coerce_content(kind, certificate_file.content)

        if kind == ContainerKind.BINARY_BUNDLE:
            return open_bundle(content, certificate_file.filename, self.backend)
        if kind == ContainerKind.BINARY_SINGLE_CERT:
            return decode_single_certificate(content, self.backend)
        return decode_pem_certificate(content, self.backend)

    @staticmethod
    def _coerce_content(kind: ContainerKind, content: Union[bytes, str]) -> Union[bytes, str]:
        if reads_as_text(kind):
            if isinstance(content, (bytes, bytearray)):
                return bytes(content).decode('utf-8', errors='replace')
            return content
        if isinstance(content, str):
            return content.encode('utf-8')
        return bytes(content)

    def _finish(self, decoded: DecodedCertificate, filename: str) -> ParseOutcome:
        result = extract_prefill_metadata(decoded, filename, self.config.notes_template)
        logger.info(f"Certificate imported from {filename}: {result.suggested_name} expires {result.expiry_date_text}")
        return ParseOutcome.success(result)

    def _failure(self, error: CertificateImportError, filename: str) -> ParseOutcome:
        logger.warning(f"Certificate import failed for {filename}: {error.kind.value} ({error.detail})")
        return ParseOutcome.failure(error.kind, self.config.message_for(error.kind), error.detail)

    def _unexpected(self, error: Exception, filename: str) -> ParseOutcome:
        logger.error(f"Unexpected error importing {filename}: {error}")
        logger.error(f"Full traceback: {traceback.format_exc()}")
        kind = ErrorKind.EXTRACTION_FAILURE
        return ParseOutcome.failure(kind, self.config.message_for(kind), str(error))
