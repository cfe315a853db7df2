"""
Unit Tests for Credential Entries
=================================
Entry validation, binary codec and provisioning URIs.
"""

import pytest

from xtotp_core.entries import (
    CredentialEntry,
    TotpAlgorithm,
    build_otpauth_uri,
    decode_base32_secret,
    decode_entry,
    encode_entry,
    parse_otpauth_uri,
)
from xtotp_core.exceptions import DecodeError, ValidationError


def make_entry(**overrides) -> CredentialEntry:
    fields = dict(
        name="GitHub",
        shared_secret=b"\xde\xad\xbe\xef",
        algorithm=TotpAlgorithm.HMAC_SHA1,
        digit_count=6,
        step_seconds=30,
    )
    fields.update(overrides)
    return CredentialEntry(**fields)


class TestCredentialEntry:
    """Tests for entry invariants."""
    
    def test_defaults(self):
        """Should default to SHA-1, 6 digits, 30 second steps."""
        entry = CredentialEntry(name="Google", shared_secret=b"\x01")
        
        assert entry.algorithm == TotpAlgorithm.HMAC_SHA1
        assert entry.digit_count == 6
        assert entry.step_seconds == 30
    
    def test_secret_not_in_repr(self):
        """Secret bytes must never show up in repr."""
        entry = make_entry(shared_secret=b"topsecretvalue")
        
        assert "topsecretvalue" not in repr(entry)
        assert "shared_secret" not in repr(entry)
    
    def test_bytearray_secret_is_copied(self):
        """A mutable secret buffer should be frozen into bytes."""
        raw = bytearray(b"abc")
        entry = make_entry(shared_secret=raw)
        raw[0] = 0
        
        assert entry.shared_secret == b"abc"
        assert isinstance(entry.shared_secret, bytes)
    
    @pytest.mark.parametrize("overrides, field", [
        ({"name": ""}, "name"),
        ({"shared_secret": b""}, "shared_secret"),
        ({"shared_secret": "not-bytes"}, "shared_secret"),
        ({"digit_count": 0}, "digit_count"),
        ({"digit_count": 10}, "digit_count"),
        ({"digit_count": True}, "digit_count"),
        ({"step_seconds": 0}, "step_seconds"),
        ({"step_seconds": 65536}, "step_seconds"),
        ({"algorithm": "MD5"}, "algorithm"),
        ({"algorithm": 7}, "algorithm"),
    ])
    def test_invalid_fields_rejected(self, overrides, field):
        """Invalid fields should raise ValidationError, never be clamped."""
        with pytest.raises(ValidationError) as exc_info:
            make_entry(**overrides)
        
        assert exc_info.value.field == field
    
    def test_algorithm_name_accepted(self):
        """String algorithm names should resolve to the enum."""
        entry = make_entry(algorithm="sha256")
        
        assert entry.algorithm is TotpAlgorithm.HMAC_SHA256
    
    def test_with_changes_validates(self):
        """with_changes should return a new entry and re-check invariants."""
        entry = make_entry()
        
        assert entry.with_changes(digit_count=8).digit_count == 8
        assert entry.digit_count == 6
        with pytest.raises(ValidationError):
            entry.with_changes(digit_count=10)


class TestTotpAlgorithm:
    """Tests for the algorithm lookup tables."""
    
    @pytest.mark.parametrize("name, expected", [
        ("SHA1", TotpAlgorithm.HMAC_SHA1),
        ("sha-256", TotpAlgorithm.HMAC_SHA256),
        ("HMAC-SHA512", TotpAlgorithm.HMAC_SHA512),
        ("hmac_sha1", TotpAlgorithm.HMAC_SHA1),
    ])
    def test_from_name(self, name, expected):
        assert TotpAlgorithm.from_name(name) is expected
    
    def test_tags_are_stable(self):
        """Wire tags are persisted and must not change."""
        assert TotpAlgorithm.HMAC_SHA1.tag == 1
        assert TotpAlgorithm.HMAC_SHA256.tag == 2
        assert TotpAlgorithm.HMAC_SHA512.tag == 3
    
    def test_unknown_tag(self):
        with pytest.raises(ValidationError):
            TotpAlgorithm.from_tag(0)
    
    def test_digest_sizes(self):
        assert [a.digest_size for a in TotpAlgorithm] == [20, 32, 64]


class TestCodec:
    """Tests for the binary entry encoding."""
    
    def test_documented_layout(self):
        """Encoding should follow the fixed big-endian layout."""
        entry = make_entry(
            name="A",
            shared_secret=b"\x01",
            algorithm=TotpAlgorithm.HMAC_SHA256,
            digit_count=6,
            step_seconds=30,
        )
        
        assert encode_entry(entry) == bytes.fromhex("01 02 001e 06 0001 41 0001 01")
    
    @pytest.mark.parametrize("entry", [
        make_entry(),
        make_entry(name="Büro ✓", algorithm=TotpAlgorithm.HMAC_SHA512, digit_count=9),
        make_entry(shared_secret=bytes(range(256)), step_seconds=65535, digit_count=1),
        make_entry(algorithm=TotpAlgorithm.HMAC_SHA256, step_seconds=1, digit_count=8),
    ])
    def test_round_trip(self, entry):
        """decode(encode(e)) should equal e."""
        assert decode_entry(encode_entry(entry)) == entry
    
    def test_empty_buffer(self):
        with pytest.raises(DecodeError):
            decode_entry(b"")
    
    def test_truncated_buffer(self):
        """Every proper prefix of a valid encoding must be rejected."""
        data = encode_entry(make_entry())
        
        for size in range(len(data)):
            with pytest.raises(DecodeError):
                decode_entry(data[:size])
    
    def test_trailing_bytes(self):
        with pytest.raises(DecodeError):
            decode_entry(encode_entry(make_entry()) + b"\x00")
    
    def test_unknown_version(self):
        data = bytearray(encode_entry(make_entry()))
        data[0] = 2
        
        with pytest.raises(DecodeError):
            decode_entry(bytes(data))
    
    def test_unknown_algorithm_tag(self):
        data = bytearray(encode_entry(make_entry()))
        data[1] = 9
        
        with pytest.raises(DecodeError):
            decode_entry(bytes(data))
    
    def test_digit_count_ten_rejected(self):
        """A persisted digit count of 10 must fail, not clamp."""
        data = bytearray(encode_entry(make_entry()))
        data[4] = 10
        
        with pytest.raises(DecodeError) as exc_info:
            decode_entry(bytes(data))
        
        assert isinstance(exc_info.value.__cause__, ValidationError)
    
    def test_zero_step_rejected(self):
        data = bytearray(encode_entry(make_entry()))
        data[2:4] = b"\x00\x00"
        
        with pytest.raises(DecodeError):
            decode_entry(bytes(data))
    
    def test_empty_secret_rejected(self):
        """Zero-length secret in the buffer is a decode error."""
        data = bytes.fromhex("01 01 001e 06 0001 41 0000")
        
        with pytest.raises(DecodeError):
            decode_entry(data)
    
    def test_empty_name_rejected(self):
        data = bytes.fromhex("01 01 001e 06 0000 0001 01")
        
        with pytest.raises(DecodeError):
            decode_entry(data)
    
    def test_invalid_utf8_name(self):
        data = bytes.fromhex("01 01 001e 06 0001 ff 0001 01")
        
        with pytest.raises(DecodeError):
            decode_entry(data)


class TestProvisioning:
    """Tests for otpauth:// import and export."""
    
    def test_parse_full_uri(self):
        """Should read label, secret and parameters."""
        entry = parse_otpauth_uri(
            "otpauth://totp/ACME%20Co:john@example.com"
            "?secret=JBSWY3DPEHPK3PXP&issuer=ACME%20Co&algorithm=SHA256&digits=8&period=60"
        )
        
        assert entry.name == "ACME Co:john@example.com"
        assert entry.shared_secret == b"Hello!\xde\xad\xbe\xef"
        assert entry.algorithm is TotpAlgorithm.HMAC_SHA256
        assert entry.digit_count == 8
        assert entry.step_seconds == 60
    
    def test_parse_defaults_and_issuer_prefix(self):
        """Missing parameters default to SHA1/6/30; issuer prefixes a bare label."""
        entry = parse_otpauth_uri("otpauth://totp/alice?secret=jbsw y3dp ehpk 3pxp&issuer=GitHub")
        
        assert entry.name == "GitHub:alice"
        assert entry.algorithm is TotpAlgorithm.HMAC_SHA1
        assert entry.digit_count == 6
        assert entry.step_seconds == 30
    
    @pytest.mark.parametrize("uri", [
        "https://example.com/?secret=JBSWY3DPEHPK3PXP",
        "otpauth://hotp/alice?secret=JBSWY3DPEHPK3PXP",
        "otpauth://totp/alice",
        "otpauth://totp/alice?secret=!!!",
        "otpauth://totp/alice?secret=JBSWY3DPEHPK3PXP&digits=ten",
        "otpauth://totp/alice?secret=JBSWY3DPEHPK3PXP&digits=10",
        "otpauth://totp/?secret=JBSWY3DPEHPK3PXP",
    ])
    def test_parse_rejects_bad_uris(self, uri):
        with pytest.raises(ValidationError):
            parse_otpauth_uri(uri)
    
    def test_build_then_parse(self):
        """An exported URI should import back to the same entry."""
        entry = make_entry(name="GitHub:alice", algorithm=TotpAlgorithm.HMAC_SHA512, digit_count=8)
        
        uri = build_otpauth_uri(entry, issuer="GitHub")
        
        assert uri.startswith("otpauth://totp/GitHub:alice?")
        assert "algorithm=SHA512" in uri
        assert parse_otpauth_uri(uri) == entry
    
    def test_build_adds_issuer_prefix(self):
        """A bare name exported with an issuer should import as "Issuer:name"."""
        entry = make_entry(name="alice")
        
        uri = build_otpauth_uri(entry, issuer="GitHub")
        
        assert uri.startswith("otpauth://totp/GitHub:alice?")
        assert "issuer=GitHub" in uri
        assert parse_otpauth_uri(uri) == entry.with_changes(name="GitHub:alice")
    
    def test_build_without_issuer_round_trips(self):
        entry = make_entry(name="alice")
        
        assert parse_otpauth_uri(build_otpauth_uri(entry)) == entry
    
    def test_parse_strips_space_around_colon(self):
        entry = parse_otpauth_uri("otpauth://totp/ACME%20:%20bob?secret=JBSWY3DPEHPK3PXP")
        
        assert entry.name == "ACME:bob"
    
    def test_base32_padding_restored(self):
        assert decode_base32_secret("MFRGG") == b"abc"
