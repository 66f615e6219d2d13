"""
Tests for the password envelope codec.
"""

import base64

import pytest

from core.security import CredentialCodec, CredentialKeyError, DecodeError


class TestCredentialCodec:
    """Tests for CredentialCodec."""

    def test_round_trip(self, codec):
        for password in ("hunter2", "", "비밀번호123", "x" * 200):
            envelope = codec.encode(password)
            assert codec.decode(envelope.iv, envelope.tag, envelope.passwd) == password

    def test_tampered_tag_fails(self, codec):
        envelope = codec.encode("hunter2")
        tag = bytearray(base64.b64decode(envelope.tag))
        tag[0] ^= 0x01

        with pytest.raises(DecodeError):
            codec.decode(envelope.iv, base64.b64encode(bytes(tag)).decode(), envelope.passwd)

    def test_tampered_ciphertext_fails(self, codec):
        envelope = codec.encode("hunter2")
        data = bytearray(base64.b64decode(envelope.passwd))
        data[-1] ^= 0xFF

        with pytest.raises(DecodeError):
            codec.decode(envelope.iv, envelope.tag, base64.b64encode(bytes(data)).decode())

    def test_wrong_key_fails(self, codec):
        envelope = codec.encode("hunter2")
        other = CredentialCodec(base64.b64encode(b"1" * 32).decode())

        with pytest.raises(DecodeError):
            other.decode(envelope.iv, envelope.tag, envelope.passwd)

    @pytest.mark.parametrize("field", ["iv", "tag", "passwd"])
    def test_malformed_base64_fails(self, codec, field):
        envelope = codec.encode("hunter2")
        fields = {"iv": envelope.iv, "tag": envelope.tag, "passwd": envelope.passwd}
        fields[field] = "not base64!!"

        with pytest.raises(DecodeError):
            codec.decode(fields["iv"], fields["tag"], fields["passwd"])

    def test_short_tag_fails(self, codec):
        envelope = codec.encode("hunter2")
        short_tag = base64.b64encode(base64.b64decode(envelope.tag)[:8]).decode()

        with pytest.raises(DecodeError):
            codec.decode(envelope.iv, short_tag, envelope.passwd)

    def test_empty_iv_fails(self, codec):
        envelope = codec.encode("hunter2")

        with pytest.raises(DecodeError):
            codec.decode("", envelope.tag, envelope.passwd)

    def test_envelope_uses_fresh_nonce(self, codec):
        first = codec.encode("hunter2")
        second = codec.encode("hunter2")

        assert first.iv != second.iv
        assert len(base64.b64decode(first.iv)) == 12
        assert len(base64.b64decode(first.tag)) == 16

    @pytest.mark.parametrize("key", [None, "", "c2hvcnQ=", "%%%not-base64%%%"])
    def test_missing_or_invalid_key(self, key):
        codec = CredentialCodec(key)

        assert not codec.is_available
        with pytest.raises(CredentialKeyError):
            codec.decode("aXY=", "dGFn", "cGFzc3dk")
