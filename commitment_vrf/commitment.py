"""
⚠️ DRAFT — requires crypto review before production use

Request commitment record and its canonical byte encoding.

Wire layout (all integers big-endian):

    block_number        u64
    len(station_id)     u64   (UTF-8 byte length)
    station_id          bytes
    upper_bound         u64
    len(requester)      u64   (UTF-8 byte length)
    requester_address   bytes
    extra_args          u8

The variable-length fields are length-prefixed, so two distinct records
never encode to the same bytes. The encoding is the message that proofs
are bound to; treat the layout as a versioned wire format
(COMMITMENT_ENCODING_VERSION).
"""

import struct
from dataclasses import dataclass

from .config import UINT64_MAX, UINT64_SIZE_BYTES
from .exceptions import MalformedEncodingError

_U64 = struct.Struct(">Q")
_U8 = struct.Struct(">B")


@dataclass(frozen=True)
class RequestCommitment:
    """
    Immutable request commitment.

    Attributes:
        block_number: Block/height reference (uint64)
        station_id: Variable-length station identifier
        upper_bound: Inclusive bound for downstream randomness (uint64).
            Consumed by collaborators, not checked against anything here.
        requester_address: Opaque requester identifier (e.g. "0x...")
        extra_args: Single-byte flag/version field

    Example:
        >>> rc = RequestCommitment(
        ...     block_number=123456,
        ...     station_id="Station12",
        ...     upper_bound=999999,
        ...     requester_address="0x123456789abcdef",
        ...     extra_args=0x01,
        ... )
        >>> len(rc.to_bytes())
        59
    """

    block_number: int
    station_id: str
    upper_bound: int
    requester_address: str
    extra_args: int = 0

    def __post_init__(self):
        for name in ("block_number", "upper_bound", "extra_args"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be int, got {type(value)}")

        for name in ("station_id", "requester_address"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise TypeError(f"{name} must be str, got {type(value)}")

        if not 0 <= self.block_number <= UINT64_MAX:
            raise ValueError(f"block_number out of uint64 range: {self.block_number}")
        if not 0 <= self.upper_bound <= UINT64_MAX:
            raise ValueError(f"upper_bound out of uint64 range: {self.upper_bound}")
        if not 0 <= self.extra_args <= 0xFF:
            raise ValueError(f"extra_args must fit in one byte: {self.extra_args}")

    def to_bytes(self) -> bytes:
        return encode_commitment(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> "RequestCommitment":
        return decode_commitment(data)


def encode_commitment(rc: RequestCommitment) -> bytes:
    """
    Encode a request commitment deterministically.

    Identical field values always produce identical bytes.
    """
    station_id = rc.station_id.encode("utf-8")
    requester = rc.requester_address.encode("utf-8")

    return b"".join(
        [
            _U64.pack(rc.block_number),
            _U64.pack(len(station_id)),
            station_id,
            _U64.pack(rc.upper_bound),
            _U64.pack(len(requester)),
            requester,
            _U8.pack(rc.extra_args),
        ]
    )


class _Reader:
    """Cursor over an encoded commitment."""

    def __init__(self, data: bytes):
        self._data = data
        self._offset = 0

    def take(self, n: int, what: str) -> bytes:
        end = self._offset + n
        if end > len(self._data):
            raise MalformedEncodingError(
                f"Truncated commitment: need {n} bytes for {what}, "
                f"{len(self._data) - self._offset} left"
            )
        chunk = self._data[self._offset:end]
        self._offset = end
        return chunk

    def u64(self, what: str) -> int:
        return _U64.unpack(self.take(UINT64_SIZE_BYTES, what))[0]

    def text(self, what: str) -> str:
        length = self.u64(f"length of {what}")
        raw = self.take(length, what)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedEncodingError(f"{what} is not valid UTF-8") from e

    def finish(self) -> None:
        if self._offset != len(self._data):
            raise MalformedEncodingError(
                f"Trailing bytes after commitment: {len(self._data) - self._offset}"
            )


def decode_commitment(data: bytes) -> RequestCommitment:
    """
    Decode bytes produced by encode_commitment.

    Raises:
        MalformedEncodingError: On truncated input, trailing bytes or
            invalid UTF-8
    """
    if not isinstance(data, (bytes, bytearray)):
        raise MalformedEncodingError(f"commitment must be bytes, got {type(data)}")

    reader = _Reader(bytes(data))
    block_number = reader.u64("block_number")
    station_id = reader.text("station_id")
    upper_bound = reader.u64("upper_bound")
    requester_address = reader.text("requester_address")
    extra_args = reader.take(1, "extra_args")[0]
    reader.finish()

    return RequestCommitment(
        block_number=block_number,
        station_id=station_id,
        upper_bound=upper_bound,
        requester_address=requester_address,
        extra_args=extra_args,
    )
