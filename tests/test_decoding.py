import io
import struct

import pytest

from monobmp import (
    DecodeError,
    DimensionOverflow,
    InvalidDimensions,
    InvalidPalette,
    InvalidSignature,
    IoFailure,
    UnexpectedEof,
    UnsupportedBitDepth,
    UnsupportedCompression,
    build,
    decode,
    decode_bytes,
    encode_bytes,
    load,
    read_header,
    save,
)


def patch(data: bytes, offset: int, fmt: str, value) -> bytes:
    out = bytearray(data)
    struct.pack_into(fmt, out, offset, value)
    return bytes(out)


def test_round_trip(random_rasters):
    for raster in random_rasters:
        assert decode_bytes(encode_bytes(raster)) == raster


def test_round_trip_21x21(checker_21):
    assert decode_bytes(encode_bytes(checker_21)) == checker_21


def test_width_8_round_trip():
    rows = [
        [1, 1, 1, 1, 1, 1, 1, 1],
        [1, 0, 0, 0, 0, 0, 0, 1],
        [1, 0, 0, 0, 0, 0, 0, 1],
        [1, 1, 1, 1, 1, 1, 1, 1],
    ]
    raster = build(rows)
    assert decode_bytes(encode_bytes(raster)) == raster


def test_known_file_bytes():
    # 2x2: top row (True, False), bottom row (False, True)
    data = (
        b"BM" + struct.pack("<III", 70, 0, 62)
        + struct.pack("<IiiHHIIiiII", 40, 2, 2, 1, 1, 0, 8, 0, 0, 2, 2)
        + bytes([0, 0, 0, 0, 255, 255, 255, 0])
        + bytes([0x40, 0, 0, 0])
        + bytes([0x80, 0, 0, 0])
    )
    assert decode_bytes(data) == build([[True, False], [False, True]])


def test_padding_bits_are_ignored():
    raster = build([[True] * 9, [False] * 9])
    data = bytearray(encode_bytes(raster))
    for offset in range(62, len(data)):
        if (offset - 62) % 4 == 1:
            data[offset] |= 0x7F
        elif (offset - 62) % 4 >= 2:
            data[offset] = 0xFF
    assert decode_bytes(bytes(data)) == raster


def test_declared_sizes_are_not_trusted(small_raster):
    data = encode_bytes(small_raster)
    data = patch(data, 2, "<I", 0xFFFFFFFF)
    data = patch(data, 10, "<I", 4)
    data = patch(data, 34, "<I", 1)
    assert decode_bytes(data) == small_raster


def test_palette_colors_are_not_interpreted(small_raster):
    data = bytearray(encode_bytes(small_raster))
    data[54:62] = bytes([1, 2, 3, 4, 1, 2, 3, 4])
    assert decode_bytes(bytes(data)) == small_raster


def test_trailing_bytes_are_ignored(small_raster):
    assert decode_bytes(encode_bytes(small_raster) + b"extra") == small_raster


@pytest.mark.parametrize("data", [b"", b"B", b"PK\x03\x04" + bytes(60), b"MB" + bytes(60)])
def test_invalid_signature(data):
    with pytest.raises(InvalidSignature):
        decode_bytes(data)


def test_unsupported_bit_depth(small_raster):
    data = patch(encode_bytes(small_raster), 28, "<H", 24)
    with pytest.raises(UnsupportedBitDepth):
        decode_bytes(data)


@pytest.mark.parametrize("compression", [1, 2, 3])
def test_unsupported_compression(small_raster, compression):
    data = patch(encode_bytes(small_raster), 30, "<I", compression)
    with pytest.raises(UnsupportedCompression):
        decode_bytes(data)


@pytest.mark.parametrize("offset, value", [(18, 0), (22, 0), (18, -3), (22, -2)])
def test_invalid_dimensions(small_raster, offset, value):
    data = patch(encode_bytes(small_raster), offset, "<i", value)
    with pytest.raises(InvalidDimensions):
        decode_bytes(data)


def test_oversized_dimensions_overflow(small_raster):
    data = patch(encode_bytes(small_raster), 18, "<i", 2**31 - 1)
    data = patch(data, 22, "<i", 2**31 - 1)
    with pytest.raises(DimensionOverflow):
        decode_bytes(data)
    with pytest.raises(DecodeError):
        decode_bytes(data)


def crafted_huge_claim(small_raster) -> bytes:
    # 2**31 - 1 columns x 15 rows still fits the 32-bit size fields (~4 GB)
    data = patch(encode_bytes(small_raster), 18, "<i", 2**31 - 1)
    return patch(data, 22, "<i", 15)


def test_huge_claim_from_file_is_truncated_not_allocated(tmp_path, small_raster):
    path = tmp_path / "crafted.bmp"
    path.write_bytes(crafted_huge_claim(small_raster))
    with pytest.raises(UnexpectedEof):
        load(str(path))


class RecordingRaw(io.RawIOBase):
    """Raw stream that remembers every size asked for."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0
        self.requested = []

    def readable(self):
        return True

    def readinto(self, buffer):
        self.requested.append(len(buffer))
        chunk = self._data[self._pos : self._pos + len(buffer)]
        buffer[: len(chunk)] = chunk
        self._pos += len(chunk)
        return len(chunk)


def test_reads_are_bounded_on_buffered_sources(small_raster):
    raw = RecordingRaw(crafted_huge_claim(small_raster))
    with pytest.raises(UnexpectedEof):
        decode(io.BufferedReader(raw))
    assert max(raw.requested) <= 1 << 16


def test_huge_claim_fails_on_short_data(small_raster):
    data = patch(encode_bytes(small_raster), 22, "<i", 100000)
    with pytest.raises(UnexpectedEof):
        decode_bytes(data)


def test_truncated_headers(small_raster):
    data = encode_bytes(small_raster)
    with pytest.raises(UnexpectedEof):
        decode_bytes(data[:10])
    with pytest.raises(UnexpectedEof):
        decode_bytes(data[:30])


def test_truncated_palette(small_raster):
    data = encode_bytes(small_raster)
    with pytest.raises(InvalidPalette):
        decode_bytes(data[:58])


def test_truncated_pixel_array(checker_21):
    data = encode_bytes(checker_21)
    with pytest.raises(UnexpectedEof):
        decode_bytes(data[:-1])
    with pytest.raises(UnexpectedEof):
        decode_bytes(data[:62])


def test_decode_errors_share_a_base(small_raster):
    data = patch(encode_bytes(small_raster), 28, "<H", 8)
    with pytest.raises(DecodeError):
        decode_bytes(data)


def test_read_header_reports_declared_fields(checker_21):
    header = read_header(io.BytesIO(encode_bytes(checker_21)))
    assert (header.width, header.height) == (21, 21)
    assert header.file_size == 146
    assert header.image_size == 84
    assert header.colors_used == 2


class ChunkedSource(io.RawIOBase):
    """Returns at most three bytes per read, like a slow pipe."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def readable(self):
        return True

    def read(self, size=-1):
        chunk = self._data[self._pos : self._pos + min(size, 3)]
        self._pos += len(chunk)
        return chunk


def test_short_reads_are_completed(checker_21):
    assert decode(ChunkedSource(encode_bytes(checker_21))) == checker_21


class BrokenSource(io.RawIOBase):
    def readable(self):
        return True

    def read(self, size=-1):
        raise OSError("device gone")


def test_source_failure_is_wrapped():
    with pytest.raises(IoFailure):
        decode(BrokenSource())


def test_load_from_file(tmp_path, checker_21):
    path = str(tmp_path / "qr.bmp")
    save(checker_21, path)
    assert load(path) == checker_21


def test_load_missing_file(tmp_path):
    with pytest.raises(IoFailure):
        load(str(tmp_path / "nope.bmp"))
