"""ABI encoding for the ArbWasm precompile.

Only the one entry point the activator needs is modelled::

    function activateProgram(address program)
        external
        payable
        returns (uint16 version, uint256 dataFee);
"""
import logging

import eth_abi
from eth_abi.exceptions import DecodingError
from eth_hash.auto import keccak
from eth_typing import Address

from stylus_activator.ethereum.util import to_canonical_address
from stylus_activator.exceptions import DecodeError

log = logging.getLogger(__name__)

# Address of the ArbWasm precompile
ARB_WASM_ADDRESS = to_canonical_address("0x0000000000000000000000000000000000000071")

ACTIVATE_PROGRAM_SIGNATURE = "activateProgram(address)"
ACTIVATE_PROGRAM_SELECTOR = keccak(ACTIVATE_PROGRAM_SIGNATURE.encode())[:4]
ACTIVATE_PROGRAM_RETURN_TYPES = ("uint16", "uint256")


class ActivationResult:
    """The decoded return tuple of ``activateProgram``."""

    def __init__(self, version: int, data_fee: int) -> None:
        self.version = version
        self.data_fee = data_fee

    def __eq__(self, other):
        if not isinstance(other, ActivationResult):
            return NotImplemented
        return (self.version, self.data_fee) == (other.version, other.data_fee)

    def __repr__(self):
        return "ActivationResult(version={}, data_fee={})".format(
            self.version, self.data_fee
        )


def encode_activate_call(program: Address) -> bytes:
    """Build the calldata for ``activateProgram(program)``.

    :param program: canonical 20-byte program address
    :return: selector followed by the address padded to one word
    """
    return ACTIVATE_PROGRAM_SELECTOR + eth_abi.encode(["address"], [bytes(program)])


def decode_activate_return(data: bytes) -> ActivationResult:
    """Decode the ``(uint16 version, uint256 dataFee)`` return tuple.

    Bytes past the two head words are ignored as the ABI allows. A payload
    that is too short or carries non-zero padding in the ``uint16`` word is
    rejected.

    :param data: raw return data of the call
    :return: the decoded result
    """
    try:
        version, data_fee = eth_abi.decode(
            list(ACTIVATE_PROGRAM_RETURN_TYPES), bytes(data), strict=True
        )
    except DecodingError as e:
        raise DecodeError(
            "cannot decode activateProgram return data 0x{}: {}".format(
                bytes(data).hex(), e
            )
        ) from e
    return ActivationResult(version, data_fee)
