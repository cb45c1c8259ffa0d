"""Test cases for payload encoding and compression."""

import base64
import gzip

import pytest

from reve import codec

SAMPLES = [b"", b"\x00\x01\x02\xff", bytes(range(256)) * 4, b"hello world" * 100]


class TestEncoding:
    """Test cases for base64 encode/decode."""

    @pytest.mark.parametrize("data", SAMPLES)
    def test_round_trip(self, data: bytes) -> None:
        assert codec.decode(codec.encode(data)) == data

    def test_output_is_ascii_text(self) -> None:
        text = codec.encode(b"\xff\xfe")
        assert text == "//4="
        assert text.isascii()

    def test_decode_rejects_garbage(self) -> None:
        with pytest.raises(ValueError):
            codec.decode("not base64!")


class TestCompression:
    """Test cases for gzip compress/decompress."""

    @pytest.mark.parametrize("data", SAMPLES)
    def test_round_trip(self, data: bytes) -> None:
        assert codec.decompress(codec.compress(data)) == data

    def test_compression_is_deterministic(self) -> None:
        data = b"same input" * 50
        assert codec.compress(data) == codec.compress(data)

    def test_compatible_with_stdlib_gzip(self) -> None:
        data = b"payload" * 20
        assert gzip.decompress(codec.compress(data)) == data


class TestPackUnpack:
    """Test cases for the composed pack/unpack helpers."""

    @pytest.mark.parametrize("compression", [False, True])
    def test_round_trip(self, compression: bool) -> None:
        data = bytes(range(256))
        packed = codec.pack(data, compression=compression)
        assert codec.unpack(packed, compression=compression) == data

    def test_uncompressed_pack_is_plain_base64(self) -> None:
        assert codec.pack(b"abc") == base64.b64encode(b"abc").decode()

    def test_compressed_pack_differs(self) -> None:
        data = b"a" * 1000
        assert codec.pack(data, compression=True) != codec.pack(data)
        assert len(codec.pack(data, compression=True)) < len(codec.pack(data))
