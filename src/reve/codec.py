"""Binary-to-text encoding and compression used for embedded payloads.

The generated index module performs the inverse operations with the same
primitives (``base64.b64decode`` and ``gzip.decompress``), so the functions
here must stay in sync with ``reve.emitter``.
"""

import base64
import gzip

# A fixed mtime keeps gzip output byte-identical across builds.
_GZIP_MTIME = 0


def encode(data: bytes) -> str:
    """Encode raw bytes as ASCII base64 text."""
    return base64.b64encode(data).decode("ascii")


def decode(text: str) -> bytes:
    """Decode base64 text produced by ``encode``."""
    return base64.b64decode(text.encode("ascii"), validate=True)


def compress(data: bytes) -> bytes:
    """Gzip *data* deterministically."""
    return gzip.compress(data, mtime=_GZIP_MTIME)


def decompress(data: bytes) -> bytes:
    """Inverse of ``compress``."""
    return gzip.decompress(data)


def pack(data: bytes, compression: bool = False) -> str:
    """Optionally compress, then encode *data* for embedding."""
    if compression:
        data = compress(data)
    return encode(data)


def unpack(text: str, compression: bool = False) -> bytes:
    """Decode, then optionally decompress an embedded payload."""
    data = decode(text)
    if compression:
        data = decompress(data)
    return data
