import pytest
from eth_hash.auto import keccak

from stylus_activator.abi.arbwasm import (
    ARB_WASM_ADDRESS,
    ActivationResult,
    decode_activate_return,
    encode_activate_call,
)
from stylus_activator.ethereum.util import to_canonical_address
from stylus_activator.exceptions import DecodeError
from tests import TEST_PROGRAM, encode_return_tuple


def test_arb_wasm_address():
    assert ARB_WASM_ADDRESS == b"\x00" * 19 + b"\x71"


def test_encode_activate_call():
    program = to_canonical_address(TEST_PROGRAM)
    data = encode_activate_call(program)

    assert len(data) == 4 + 32
    assert data[:4] == keccak(b"activateProgram(address)")[:4]
    assert data[4:] == b"\x00" * 12 + program


def test_encode_activate_call_is_deterministic():
    program = to_canonical_address(TEST_PROGRAM)
    assert encode_activate_call(program) == encode_activate_call(program)


@pytest.mark.parametrize(
    "version,data_fee", [(1, 12345), (2, 999000), (0, 0), (65535, 2 ** 256 - 1)]
)
def test_decode_activate_return(version, data_fee):
    assert decode_activate_return(
        encode_return_tuple(version, data_fee)
    ) == ActivationResult(version, data_fee)


def test_decode_tolerates_trailing_bytes():
    data = encode_return_tuple(1, 12345) + b"\x00" * 32
    assert decode_activate_return(data) == ActivationResult(1, 12345)


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"\x00" * 32,
        encode_return_tuple(1, 12345)[:63],
    ],
)
def test_decode_rejects_short_payload(data):
    with pytest.raises(DecodeError):
        decode_activate_return(data)


def test_decode_rejects_dirty_uint16_padding():
    # 0x10001 does not fit the uint16 slot
    data = (0x10001).to_bytes(32, "big") + (5).to_bytes(32, "big")
    with pytest.raises(DecodeError):
        decode_activate_return(data)
