"""Tests for unpadded base64url segment encoding."""

import pytest

from jwtkit.codec.base64url import decode_segment, encode_segment
from jwtkit.core.errors import DecodeError, MalformedTokenError


class TestEncodeSegment:
    """Tests for encode_segment."""

    def test_empty(self) -> None:
        assert encode_segment(b"") == ""

    def test_uses_url_safe_alphabet(self) -> None:
        assert encode_segment(b"\xfb\xff") == "-_8"

    def test_strips_padding(self) -> None:
        assert encode_segment(b"a") == "YQ"
        assert encode_segment(b"ab") == "YWI"

    def test_header_json(self) -> None:
        assert encode_segment(b'{"alg":"HS256"}') == "eyJhbGciOiJIUzI1NiJ9"


class TestDecodeSegment:
    """Tests for decode_segment."""

    @pytest.mark.parametrize(
        "data", [b"", b"a", b"ab", b"abc", b"\x00\xff\xfe", bytes(range(256))]
    )
    def test_inverts_encode(self, data: bytes) -> None:
        assert decode_segment(encode_segment(data)) == data

    def test_decodes_url_safe_characters(self) -> None:
        assert decode_segment("-_8") == b"\xfb\xff"

    @pytest.mark.parametrize("text", ["YQ==", "YQ=", "YWI="])
    def test_rejects_padding(self, text: str) -> None:
        with pytest.raises(DecodeError):
            decode_segment(text)

    @pytest.mark.parametrize("text", ["a+b/", "ab cd", "abc\n", "é"])
    def test_rejects_characters_outside_alphabet(self, text: str) -> None:
        with pytest.raises(DecodeError):
            decode_segment(text)

    def test_rejects_impossible_length(self) -> None:
        with pytest.raises(DecodeError):
            decode_segment("abcde")

    def test_rejects_non_canonical_trailing_bits(self) -> None:
        # "-_9" carries the same two bytes as "-_8" plus a stray low bit
        with pytest.raises(DecodeError):
            decode_segment("-_9")

    def test_decode_error_is_malformed_token_error(self) -> None:
        with pytest.raises(MalformedTokenError):
            decode_segment("!!!")
