"""
Tests for the PKCS12, DER and PEM decoders, against the recording fake
backend and against the real cryptography backend
"""

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.x509.oid import NameOID

from certimport import AttributeKind, AwaitingPassword, DecodeFailure, ErrorKind, default_backend
from certimport.formats.der import decode_single_certificate
from certimport.formats.pem import decode_pem_certificate
from certimport.formats.pkcs12 import open_bundle, resume_bundle, select_certificate


def _common_name(cert):
    return next(a.value for a in cert.subject if a.short_name == "CN")


class TestBundleDecoder:

    def test_empty_password_opens_bundle(self, fake_backend):
        cert = open_bundle(b"\x30\x03\x02\x01\x03", "bundle.p12", fake_backend)

        assert _common_name(cert) == "bundle.example.com"
        assert fake_backend.unpack_passwords == [""]

    def test_asn1_failure_is_fatal(self, fake_backend):
        fake_backend.der_ok = False

        with pytest.raises(DecodeFailure) as exc_info:
            open_bundle(b"garbage", "bundle.p12", fake_backend)

        assert exc_info.value.kind == ErrorKind.ASN1_DECODE_FAILURE
        assert exc_info.value.stage == "asn1"
        assert fake_backend.unpack_passwords == []

    def test_encrypted_bundle_pauses_for_password(self, fake_backend):
        fake_backend.bundle_password = "hunter2"

        pending = open_bundle(b"\x30\x00", "bundle.pfx", fake_backend)

        assert isinstance(pending, AwaitingPassword)
        assert pending.filename == "bundle.pfx"
        assert fake_backend.unpack_passwords == [""]

    def test_resume_with_right_password(self, fake_backend):
        fake_backend.bundle_password = "hunter2"
        pending = open_bundle(b"\x30\x00", "bundle.pfx", fake_backend)

        cert = resume_bundle(pending, "hunter2", fake_backend)

        assert _common_name(cert) == "bundle.example.com"
        assert fake_backend.unpack_passwords == ["", "hunter2"]
        # the DER structure is not parsed a second time
        assert [c[0] for c in fake_backend.calls].count("parse_der") == 1

    def test_resume_with_wrong_password(self, fake_backend):
        fake_backend.bundle_password = "hunter2"
        pending = open_bundle(b"\x30\x00", "bundle.pfx", fake_backend)

        with pytest.raises(DecodeFailure) as exc_info:
            resume_bundle(pending, "wrong", fake_backend)

        assert exc_info.value.kind == ErrorKind.BUNDLE_UNPACK_FAILURE
        assert exc_info.value.attempts == 2

    def test_resume_without_answer_uses_empty_password(self, fake_backend):
        fake_backend.bundle_password = "hunter2"
        pending = open_bundle(b"\x30\x00", "bundle.pfx", fake_backend)

        with pytest.raises(DecodeFailure):
            resume_bundle(pending, None, fake_backend)

        assert fake_backend.unpack_passwords == ["", ""]

    def test_bundle_without_certificates(self, fake_backend):
        fake_backend.bundle_certificates = []

        with pytest.raises(DecodeFailure) as exc_info:
            open_bundle(b"\x30\x00", "bundle.p12", fake_backend)

        assert exc_info.value.kind == ErrorKind.NO_CERTIFICATE_IN_BUNDLE

    def test_first_certificate_bag_wins(self, make_decoded):
        first = make_decoded(common_name="first")
        second = make_decoded(common_name="second")

        assert select_certificate([first, second]) is first


class TestSingleCertDecoder:

    def test_der_success(self, fake_backend):
        cert = decode_single_certificate(b"\x30\x00", fake_backend)

        assert _common_name(cert) == "der.example.com"
        assert ("certificate_from_pem",) not in fake_backend.calls

    def test_pem_fallback_when_marker_present(self, fake_backend):
        fake_backend.der_ok = False
        content = b"subject=...\n-----BEGIN CERTIFICATE-----\nMIIB\n-----END CERTIFICATE-----\n"

        cert = decode_single_certificate(content, fake_backend)

        assert _common_name(cert) == "pem.example.com"

    def test_der_failure_without_marker(self, fake_backend):
        fake_backend.der_ok = False

        with pytest.raises(DecodeFailure) as exc_info:
            decode_single_certificate(b"\x00\x01not a certificate", fake_backend)

        assert exc_info.value.kind == ErrorKind.DER_DECODE_FAILURE
        assert "Insufficient data" in str(exc_info.value)
        assert ("certificate_from_pem",) not in fake_backend.calls

    def test_real_der_certificate(self, der_bytes):
        cert = decode_single_certificate(der_bytes, default_backend)
        assert _common_name(cert) == "example.com"

    def test_real_pem_in_cer_file(self, pem_text):
        cert = decode_single_certificate(pem_text.encode("ascii"), default_backend)
        assert _common_name(cert) == "example.com"


class TestPemDecoder:

    def test_missing_marker_skips_backend(self, fake_backend):
        with pytest.raises(DecodeFailure) as exc_info:
            decode_pem_certificate("just some text", fake_backend)

        assert exc_info.value.kind == ErrorKind.INVALID_PEM
        assert exc_info.value.stage == "invalid_pem"
        assert fake_backend.calls == []

    def test_backend_error_is_invalid_pem(self, fake_backend):
        fake_backend.pem_error = ValueError("Unable to load PEM file")

        with pytest.raises(DecodeFailure) as exc_info:
            decode_pem_certificate("-----BEGIN CERTIFICATE-----\nAAAA\n-----END CERTIFICATE-----\n", fake_backend)

        assert exc_info.value.kind == ErrorKind.INVALID_PEM

    def test_real_pem(self, pem_text):
        cert = decode_pem_certificate(pem_text, default_backend)
        assert _common_name(cert) == "example.com"


class TestCryptographyBackend:

    def test_plain_bundle(self, p12_plain):
        structure = default_backend.parse_der(p12_plain)
        certs = default_backend.unpack_pkcs12(structure, "")
        assert [_common_name(c) for c in certs] == ["example.com"]

    def test_encrypted_bundle_needs_password(self, p12_encrypted, p12_password):
        structure = default_backend.parse_der(p12_encrypted)
        with pytest.raises(ValueError):
            default_backend.unpack_pkcs12(structure, "")
        certs = default_backend.unpack_pkcs12(structure, p12_password)
        assert len(certs) == 1

    def test_chain_bundle_keeps_main_certificate_first(self, p12_with_chain):
        structure = default_backend.parse_der(p12_with_chain)
        certs = default_backend.unpack_pkcs12(structure, "")
        assert [_common_name(c) for c in certs] == ["leaf.example.com", "Example Issuing CA"]

    def test_parse_der_rejects_trailing_data(self, der_bytes):
        with pytest.raises(ValueError):
            default_backend.parse_der(der_bytes + b"\x00\x00")

    def test_subject_attributes_are_typed(self, make_cert):
        cert = make_cert([(NameOID.ORGANIZATION_NAME, "Example Org"), (NameOID.COMMON_NAME, "example.com")])
        structure = default_backend.parse_der(cert.public_bytes(serialization.Encoding.DER))
        decoded = default_backend.certificate_from_asn1(structure)

        assert [a.kind for a in decoded.subject] == [
            AttributeKind.OTHER, AttributeKind.ORGANIZATION_NAME, AttributeKind.COMMON_NAME
        ]
        assert [a.short_name for a in decoded.subject] == ["C", "O", "CN"]
        assert decoded.subject[2].name == "commonName"
