# smartid/utils/helpers.py
import base64
import binascii
from datetime import datetime, timezone
from typing import Union
from urllib.parse import quote

# -------- Base64 utilities --------
def b64(data: bytes) -> str:
    """Standard base64 encode bytes to string."""
    return base64.b64encode(data).decode()

def b64_dec(s: Union[str, bytes]) -> bytes:
    """Strict standard base64 decode; raises ValueError on malformed input."""
    if isinstance(s, str):
        s = s.encode()
    try:
        return base64.b64decode(s, validate=True)
    except binascii.Error as e:
        raise ValueError(f"bad base64: {e}") from e

# -------- Hash encodings --------
def hash_bytes(value: Union[str, bytes], encoding: str = "hex") -> bytes:
    """Decode a session/document hash given as hex, base64 or raw bytes."""
    if isinstance(value, bytes):
        return value
    if encoding == "hex":
        return bytes.fromhex(value)
    if encoding == "base64":
        return b64_dec(value)
    raise ValueError(f"unsupported hash encoding: {encoding}")

# -------- Time utility --------
def utcnow() -> datetime:
    """Current instant as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)

# -------- URL utility --------
def path_segment(value: str) -> str:
    """Percent-encode one URL path segment; '/', '?' and '#' never survive unescaped."""
    value = str(value)
    if value in ("", ".", ".."):
        raise ValueError(f"invalid path segment: {value!r}")
    return quote(value, safe="")
