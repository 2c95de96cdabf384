"""Unpadded base64url encoding for compact token segments."""

import base64
import binascii
import re

from jwtkit.core.errors import DecodeError

_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


def encode_segment(data: bytes) -> str:
    """Encode bytes as base64url without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def decode_segment(text: str) -> bytes:
    """Decode an unpadded base64url segment.

    Only the canonical encoding of a byte string is accepted: padding,
    characters outside the alphabet and non-zero trailing bits are all
    rejected, so a segment can never be altered without changing the
    decoded bytes or failing here.
    """
    if not _ALPHABET.fullmatch(text):
        raise DecodeError("Segment contains characters outside base64url")
    if len(text) % 4 == 1:
        raise DecodeError(f"Invalid base64url length: {len(text)}")
    try:
        data = base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))
    except binascii.Error as exc:
        raise DecodeError(str(exc)) from exc
    if encode_segment(data) != text:
        raise DecodeError("Segment has non-canonical trailing bits")
    return data
