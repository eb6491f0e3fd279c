"""This module contains various utility functions regarding the RPC data format
and validation."""
from decimal import Decimal

from .constants import BLOCK_TAGS

UINT256_MAX = 2 ** 256 - 1


def hex_to_dec(x):
    """Convert a hex quantity to decimal.

    :param x:
    :return:
    """
    return int(x, 16)


def clean_hex(d):
    """Convert a non-negative integer to a JSON-RPC quantity.

    :param d:
    :return:
    """
    if d < 0 or d > UINT256_MAX:
        raise ValueError("quantity out of uint256 range: {}".format(d))
    return hex(d)


def encode_data(data):
    """Convert raw bytes to a 0x-prefixed JSON-RPC data string.

    :param data:
    :return:
    """
    return "0x" + bytes(data).hex()


def validate_block(block):
    """

    :param block:
    :return:
    """
    if isinstance(block, str):
        if block not in BLOCK_TAGS:
            raise ValueError("invalid block tag")
    if isinstance(block, int):
        block = hex(block)
    return block


def wei_to_ether(wei):
    """Convert wei to ether.

    :param wei:
    :return:
    """
    return Decimal(wei) / 10 ** 18


def ether_to_wei(ether):
    """Convert ether to wei.

    :param ether:
    :return:
    """
    return int(Decimal(ether) * 10 ** 18)
