# backend-fastapi/certimport/formats/classifier.py
# Extension-driven container classification

import logging

from ..errors import UnsupportedFormatError
from ..types import ContainerKind

logger = logging.getLogger(__name__)

EXTENSION_MAP = {
    'p12': ContainerKind.BINARY_BUNDLE,
    'pfx': ContainerKind.BINARY_BUNDLE,
    'cer': ContainerKind.BINARY_SINGLE_CERT,
    'pem': ContainerKind.PEM,
    'crt': ContainerKind.PEM,
}

SUPPORTED_EXTENSIONS = frozenset(EXTENSION_MAP)


def get_extension(filename: str) -> str:
    """Lowercased text after the last dot, or an empty string"""
    if '.' not in filename:
        return ''
    return filename.rsplit('.', 1)[-1].lower()


def is_supported(filename: str) -> bool:
    return get_extension(filename) in SUPPORTED_EXTENSIONS


def classify_extension(extension: str) -> ContainerKind:
    """Map a normalized extension to its encoding family"""
    kind = EXTENSION_MAP.get(extension.lower())
    if kind is None:
        raise UnsupportedFormatError(f"Unsupported file extension: '{extension}'", stage="classify")
    return kind


def classify(filename: str) -> ContainerKind:
    """Map a filename to the encoding family its extension promises"""
    kind = classify_extension(get_extension(filename))
    logger.debug(f"Container classification: {filename} -> {kind.value}")
    return kind


def reads_as_text(kind: ContainerKind) -> bool:
    """PEM-family files are read as text, everything else as bytes"""
    return kind == ContainerKind.PEM
