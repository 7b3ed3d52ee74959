"""
Shared fixtures: real certificates built with cryptography, a recording
fake backend, and SelectedFile helpers that track content reads.
"""

import datetime
import os
import sys
import time

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

# Add the parent directory (backend-fastapi) to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from certimport import (
    AttributeKind, DecodedCertificate, SelectedFile, SubjectAttribute
)
from certimport.backend import Asn1Structure

# Expiry dates are rendered in local time; pin it for stable assertions
os.environ["TZ"] = "UTC"
if hasattr(time, "tzset"):
    time.tzset()

P12_PASSWORD = "s3cret-pass"
DEFAULT_NOT_AFTER = datetime.datetime(2026, 3, 15, 12, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture(scope="session")
def ec_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def make_cert(ec_key):
    """Factory: make_cert([(oid, value), ...], not_after) -> x509.Certificate"""

    def _make(subject=None, not_after=DEFAULT_NOT_AFTER, key=None):
        key = key or ec_key
        if subject is None:
            subject = [(NameOID.COMMON_NAME, "example.com")]
        attributes = [x509.NameAttribute(NameOID.COUNTRY_NAME, "CH")]
        attributes.extend(x509.NameAttribute(oid, value) for oid, value in subject)
        name = x509.Name(attributes)
        return (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc))
            .not_valid_after(not_after)
            .sign(key, hashes.SHA256())
        )

    return _make


@pytest.fixture(scope="session")
def example_cert(make_cert):
    return make_cert()


@pytest.fixture(scope="session")
def pem_text(example_cert):
    return example_cert.public_bytes(serialization.Encoding.PEM).decode("ascii")


@pytest.fixture(scope="session")
def der_bytes(example_cert):
    return example_cert.public_bytes(serialization.Encoding.DER)


@pytest.fixture(scope="session")
def org_only_pem(make_cert):
    cert = make_cert([(NameOID.ORGANIZATION_NAME, "Example Org")],
                     not_after=datetime.datetime(2027, 6, 30, 12, 0, tzinfo=datetime.timezone.utc))
    return cert.public_bytes(serialization.Encoding.PEM).decode("ascii")


@pytest.fixture(scope="session")
def p12_plain(ec_key, example_cert):
    return pkcs12.serialize_key_and_certificates(
        b"example", ec_key, example_cert, None, serialization.NoEncryption()
    )


@pytest.fixture(scope="session")
def p12_encrypted(ec_key, example_cert):
    return pkcs12.serialize_key_and_certificates(
        b"example", ec_key, example_cert, None,
        serialization.BestAvailableEncryption(P12_PASSWORD.encode("utf-8"))
    )


@pytest.fixture(scope="session")
def p12_key_only(ec_key):
    return pkcs12.serialize_key_and_certificates(
        b"key-only", ec_key, None, None, serialization.NoEncryption()
    )


@pytest.fixture(scope="session")
def p12_with_chain(ec_key, make_cert):
    leaf = make_cert([(NameOID.COMMON_NAME, "leaf.example.com")])
    ca = make_cert([(NameOID.COMMON_NAME, "Example Issuing CA")], key=ec.generate_private_key(ec.SECP256R1()))
    return pkcs12.serialize_key_and_certificates(
        b"chain", ec_key, leaf, [ca], serialization.NoEncryption()
    )


def decoded(common_name=None, organization=None, not_after=DEFAULT_NOT_AFTER, order=("O", "CN")):
    """Build a DecodedCertificate directly, skipping the crypto library"""
    available = {
        "CN": SubjectAttribute(AttributeKind.COMMON_NAME, "commonName", "CN", common_name) if common_name else None,
        "O": SubjectAttribute(AttributeKind.ORGANIZATION_NAME, "organizationName", "O", organization) if organization else None,
    }
    subject = [SubjectAttribute(AttributeKind.OTHER, "countryName", "C", "CH")]
    subject.extend(available[key] for key in order if available[key] is not None)
    return DecodedCertificate(
        subject=tuple(subject),
        not_before=datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc),
        not_after=not_after,
    )


class FakeBackend:
    """Recording CryptoBackend double"""

    def __init__(self):
        self.calls = []
        self.der_ok = True
        self.bundle_password = ""      # password that unlocks the bundle
        self.bundle_certificates = [decoded(common_name="bundle.example.com")]
        self.der_certificate = decoded(common_name="der.example.com")
        self.pem_certificate = decoded(common_name="pem.example.com")
        self.pem_error = None

    def parse_der(self, data):
        self.calls.append(("parse_der", len(data)))
        if not self.der_ok:
            raise ValueError("Insufficient data")
        return Asn1Structure(der=bytes(data))

    def unpack_pkcs12(self, structure, password):
        self.calls.append(("unpack_pkcs12", password))
        if password != self.bundle_password:
            raise ValueError("Invalid password or PKCS12 data")
        return list(self.bundle_certificates)

    def certificate_from_asn1(self, structure):
        self.calls.append(("certificate_from_asn1",))
        return self.der_certificate

    def certificate_from_pem(self, text):
        self.calls.append(("certificate_from_pem",))
        if self.pem_error is not None:
            raise self.pem_error
        return self.pem_certificate

    @property
    def unpack_passwords(self):
        return [call[1] for call in self.calls if call[0] == "unpack_pkcs12"]


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def selected_file():
    """Factory returning (SelectedFile, reads) where reads counts content reads"""

    def _make(filename, content=b"", size=None):
        reads = []

        def _read():
            reads.append(filename)
            return content

        return SelectedFile(filename=filename, size=len(content) if size is None else size, read=_read), reads

    return _make


@pytest.fixture
def make_decoded():
    return decoded


@pytest.fixture
def p12_password():
    return P12_PASSWORD
