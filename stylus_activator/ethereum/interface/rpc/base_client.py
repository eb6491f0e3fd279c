"""This module provides a basic RPC interface client.

This code is adapted from: https://github.com/ConsenSys/ethjsonrpc
"""

import logging
import time
from abc import abstractmethod
from typing import Dict, Optional

from stylus_activator.ethereum.util import safe_decode, to_rpc_address
from .constants import BLOCK_TAG_LATEST, BLOCK_TAG_PENDING
from .exceptions import BadResponseError
from .utils import encode_data, hex_to_dec, validate_block

NITRO_DEFAULT_RPC_PORT = 8547
DEFAULT_POLL_INTERVAL = 0.25

log = logging.getLogger(__name__)


def _decode_data(result) -> bytes:
    """Decode a hex data result, anything else is a bad response."""
    try:
        return safe_decode(result)
    except ValueError:
        raise BadResponseError(result)


class BaseClient(object):
    """The base RPC client class."""

    @abstractmethod
    def _call(self, method, params=None, _id=1):
        """Send one JSON-RPC request and return its ``result`` member.

        :param method:
        :param params:
        :param _id:
        :return:
        """

        pass

    def eth_chainId(self) -> int:
        """
        https://eips.ethereum.org/EIPS/eip-695
        """
        return hex_to_dec(self._call("eth_chainId"))

    def eth_getCode(self, address: bytes, block=BLOCK_TAG_LATEST) -> bytes:
        """Fetch the deployed bytecode of ``address``.

        https://ethereum.org/en/developers/docs/apis/json-rpc/#eth_getcode
        """
        block = validate_block(block)
        return _decode_data(
            self._call("eth_getCode", [to_rpc_address(address), block])
        )

    def eth_call(
        self, call: Dict, block=BLOCK_TAG_LATEST, state_override: Optional[Dict] = None
    ) -> bytes:
        """Execute ``call`` as a read-only message call.

        ``state_override`` is passed as the third positional parameter, the
        account override set understood by geth-derived nodes. It only lives
        for the duration of this call.

        https://geth.ethereum.org/docs/interacting-with-geth/rpc/ns-eth#eth-call
        """
        block = validate_block(block)
        params = [call, block]
        if state_override:
            params.append(state_override)
        return _decode_data(self._call("eth_call", params))

    def eth_estimateGas(self, call: Dict) -> int:
        """
        https://ethereum.org/en/developers/docs/apis/json-rpc/#eth_estimategas
        """
        return hex_to_dec(self._call("eth_estimateGas", [call]))

    def eth_getTransactionCount(self, address: bytes, block=BLOCK_TAG_PENDING) -> int:
        """
        https://ethereum.org/en/developers/docs/apis/json-rpc/#eth_gettransactioncount
        """
        block = validate_block(block)
        return hex_to_dec(
            self._call("eth_getTransactionCount", [to_rpc_address(address), block])
        )

    def eth_maxPriorityFeePerGas(self) -> int:
        return hex_to_dec(self._call("eth_maxPriorityFeePerGas"))

    def eth_getBlockByNumber(self, block=BLOCK_TAG_LATEST, tx_objects=False):
        """
        https://ethereum.org/en/developers/docs/apis/json-rpc/#eth_getblockbynumber
        """
        block = validate_block(block)
        return self._call("eth_getBlockByNumber", [block, tx_objects])

    def eth_sendRawTransaction(self, raw_transaction: bytes) -> str:
        """Broadcast a signed transaction envelope and return its hash.

        https://ethereum.org/en/developers/docs/apis/json-rpc/#eth_sendrawtransaction
        """
        return self._call("eth_sendRawTransaction", [encode_data(raw_transaction)])

    def eth_getTransactionByHash(self, tx_hash: str):
        """
        https://ethereum.org/en/developers/docs/apis/json-rpc/#eth_gettransactionbyhash
        """
        return self._call("eth_getTransactionByHash", [tx_hash])

    def eth_getTransactionReceipt(self, tx_hash: str):
        """
        https://ethereum.org/en/developers/docs/apis/json-rpc/#eth_gettransactionreceipt
        """
        return self._call("eth_getTransactionReceipt", [tx_hash])

    def wait_for_receipt(self, tx_hash: str, poll_interval=DEFAULT_POLL_INTERVAL):
        """Block until ``tx_hash`` is included in a block.

        There is no timeout. Returns None when the node no longer knows the
        transaction, i.e. it was dropped before being mined.

        :param tx_hash:
        :param poll_interval: seconds between two polls
        :return: the receipt, or None
        """
        while True:
            receipt = self.eth_getTransactionReceipt(tx_hash)
            if receipt is not None and receipt.get("blockNumber") is not None:
                return receipt
            if self.eth_getTransactionByHash(tx_hash) is None:
                log.warning("Transaction %s is unknown to the node", tx_hash)
                return None
            log.debug("Waiting for %s to be mined", tx_hash)
            time.sleep(poll_interval)
