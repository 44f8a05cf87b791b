"""
⚠️ DRAFT — requires crypto review before production use

Tests for request commitment encoding.
"""

import dataclasses

import pytest

from commitment_vrf.commitment import (
    RequestCommitment,
    decode_commitment,
    encode_commitment,
)
from commitment_vrf.exceptions import MalformedEncodingError

SCENARIO_ENCODING = bytes.fromhex(
    "000000000001e240"  # block_number = 123456
    "0000000000000009"  # len("Station12")
    "53746174696f6e3132"  # "Station12"
    "00000000000f423f"  # upper_bound = 999999
    "0000000000000011"  # len("0x123456789abcdef")
    "3078313233343536373839616263646566"  # "0x123456789abcdef"
    "01"  # extra_args
)


@pytest.fixture
def scenario():
    return RequestCommitment(
        block_number=123456,
        station_id="Station12",
        upper_bound=999999,
        requester_address="0x123456789abcdef",
        extra_args=0x01,
    )


# ============================================================================
# ENCODING
# ============================================================================


def test_scenario_encoding(scenario):
    assert encode_commitment(scenario) == SCENARIO_ENCODING
    assert len(SCENARIO_ENCODING) == 59


def test_to_bytes_alias(scenario):
    assert scenario.to_bytes() == encode_commitment(scenario)


def test_identical_fields_encode_identically(scenario):
    twin = RequestCommitment(
        block_number=123456,
        station_id="Station12",
        upper_bound=999999,
        requester_address="0x123456789abcdef",
        extra_args=0x01,
    )
    assert twin is not scenario
    assert encode_commitment(twin) == encode_commitment(scenario)


def test_length_prefix_prevents_collisions():
    """Moving bytes between the two strings changes the encoding."""
    a = RequestCommitment(1, "AB", 5, "CD", 0)
    b = RequestCommitment(1, "ABC", 5, "D", 0)
    assert encode_commitment(a) != encode_commitment(b)


def test_length_prefix_counts_utf8_bytes():
    rc = RequestCommitment(1, "Stätion", 2, "", 0)
    data = encode_commitment(rc)
    assert data[8:16] == (8).to_bytes(8, "big")
    assert data[16:24] == "Stätion".encode("utf-8")


def test_empty_strings():
    rc = RequestCommitment(0, "", 0, "", 0)
    assert encode_commitment(rc) == b"\x00" * 33


def test_max_values():
    rc = RequestCommitment(2**64 - 1, "s", 2**64 - 1, "r", 255)
    data = encode_commitment(rc)
    assert data[:8] == b"\xff" * 8
    assert data[-1] == 255


def test_default_extra_args():
    rc = RequestCommitment(1, "s", 2, "r")
    assert rc.extra_args == 0
    assert encode_commitment(rc)[-1] == 0


# ============================================================================
# DECODING
# ============================================================================


def test_decode_scenario(scenario):
    assert decode_commitment(SCENARIO_ENCODING) == scenario
    assert RequestCommitment.from_bytes(SCENARIO_ENCODING) == scenario


@pytest.mark.parametrize(
    "rc",
    [
        RequestCommitment(0, "", 0, "", 0),
        RequestCommitment(42, "Stätion-✓", 7, "0xdeadbeef", 200),
        RequestCommitment(2**64 - 1, "x" * 300, 2**64 - 1, "y" * 1000, 255),
    ],
)
def test_encode_decode_encode_is_stable(rc):
    encoded = encode_commitment(rc)
    assert encode_commitment(decode_commitment(encoded)) == encoded
    assert decode_commitment(encoded) == rc


@pytest.mark.parametrize("cut", [0, 1, 8, 15, 20, 30, 58])
def test_decode_truncated(cut):
    with pytest.raises(MalformedEncodingError, match="Truncated"):
        decode_commitment(SCENARIO_ENCODING[:cut])


def test_decode_trailing_bytes():
    with pytest.raises(MalformedEncodingError, match="Trailing"):
        decode_commitment(SCENARIO_ENCODING + b"\x00")


def test_decode_oversized_length_prefix():
    data = bytearray(SCENARIO_ENCODING)
    data[8:16] = (2**63).to_bytes(8, "big")
    with pytest.raises(MalformedEncodingError):
        decode_commitment(bytes(data))


def test_decode_invalid_utf8():
    data = (
        (1).to_bytes(8, "big")
        + (1).to_bytes(8, "big")
        + b"\xff"
        + (2).to_bytes(8, "big")
        + (0).to_bytes(8, "big")
        + b"\x00"
    )
    with pytest.raises(MalformedEncodingError, match="UTF-8"):
        decode_commitment(data)


def test_decode_non_bytes():
    with pytest.raises(MalformedEncodingError):
        decode_commitment(SCENARIO_ENCODING.hex())


# ============================================================================
# VALIDATION
# ============================================================================


@pytest.mark.parametrize(
    "kwargs",
    [
        {"block_number": -1},
        {"block_number": 2**64},
        {"upper_bound": 2**64},
        {"extra_args": 256},
        {"extra_args": -1},
    ],
)
def test_out_of_range_fields(kwargs):
    fields = dict(
        block_number=1, station_id="s", upper_bound=2, requester_address="r", extra_args=0
    )
    fields.update(kwargs)
    with pytest.raises(ValueError):
        RequestCommitment(**fields)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"block_number": "1"},
        {"block_number": True},
        {"station_id": b"bytes"},
        {"requester_address": 5},
        {"extra_args": b"\x01"},
    ],
)
def test_wrong_field_types(kwargs):
    fields = dict(
        block_number=1, station_id="s", upper_bound=2, requester_address="r", extra_args=0
    )
    fields.update(kwargs)
    with pytest.raises(TypeError):
        RequestCommitment(**fields)


def test_immutable(scenario):
    with pytest.raises(dataclasses.FrozenInstanceError):
        scenario.block_number = 1
