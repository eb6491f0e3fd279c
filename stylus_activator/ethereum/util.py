"""This module contains utility functions for moving values between the
canonical in-process representation and the hex strings used on the wire."""
import logging

from eth_typing import Address, ChecksumAddress
from eth_utils import to_canonical_address as _to_canonical_address
from eth_utils import to_checksum_address

log = logging.getLogger(__name__)

ADDRESS_LENGTH = 20
ZERO_ADDRESS = Address(b"\x00" * ADDRESS_LENGTH)


def safe_decode(hex_encoded_string):
    """

    :param hex_encoded_string:
    :return:
    """
    if not isinstance(hex_encoded_string, str):
        raise ValueError("expected a hex string, got {!r}".format(hex_encoded_string))
    if hex_encoded_string.startswith("0x"):
        return bytes.fromhex(hex_encoded_string[2:])
    else:
        return bytes.fromhex(hex_encoded_string)


def to_canonical_address(address) -> Address:
    """Reinterpret a hex string or 20 raw bytes as the canonical address.

    :param address: ``0x``-prefixed hex string (any casing) or bytes
    :return: the 20-byte address
    """
    if isinstance(address, (bytes, bytearray)) and len(address) != ADDRESS_LENGTH:
        raise ValueError("address must be 20 bytes, got {}".format(len(address)))
    return Address(_to_canonical_address(address))


def to_rpc_address(address: bytes) -> ChecksumAddress:
    """Render a canonical address as the EIP-55 string used by JSON-RPC and
    the signer.

    :param address: 20-byte address
    :return: checksummed ``0x`` string
    """
    if not isinstance(address, (bytes, bytearray)) or len(address) != ADDRESS_LENGTH:
        raise ValueError("expected a 20-byte address, got {!r}".format(address))
    return to_checksum_address(bytes(address))
