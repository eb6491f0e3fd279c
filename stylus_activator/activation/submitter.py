"""This module builds, signs and broadcasts the activation transaction and
waits for it to be mined.

The transaction goes through ``Built -> Submitted`` and ends either
confirmed (a receipt is returned), not confirmed
(:class:`ActivationNotConfirmed`) or with the transport/signing error that
interrupted it. Nothing is retried here.
"""
import logging
from typing import Dict

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_typing import Address, ChecksumAddress

from stylus_activator.abi.arbwasm import ARB_WASM_ADDRESS, encode_activate_call
from stylus_activator.ethereum.interface.rpc.base_client import (
    BaseClient,
    DEFAULT_POLL_INTERVAL,
)
from stylus_activator.ethereum.interface.rpc.constants import (
    BLOCK_TAG_LATEST,
    BLOCK_TAG_PENDING,
)
from stylus_activator.ethereum.interface.rpc.utils import (
    clean_hex,
    encode_data,
    hex_to_dec,
)
from stylus_activator.ethereum.util import to_canonical_address, to_rpc_address
from stylus_activator.exceptions import ActivationNotConfirmed

log = logging.getLogger(__name__)

EIP1559_TX_TYPE = 2


class Signer:
    """A local private key bound to one chain id."""

    def __init__(self, account: LocalAccount, chain_id: int) -> None:
        self.account = account
        self.chain_id = chain_id

    @classmethod
    def from_key(cls, private_key: str, chain_id: int) -> "Signer":
        return cls(Account.from_key(private_key), chain_id)

    @property
    def address(self) -> ChecksumAddress:
        return self.account.address

    @property
    def canonical_address(self) -> Address:
        return to_canonical_address(self.account.address)

    def sign_transaction(self, transaction: Dict) -> bytes:
        """Sign ``transaction`` for this signer's chain.

        :param transaction: a filled EIP-1559 transaction dict
        :return: the raw signed envelope
        """
        transaction = dict(transaction, chainId=self.chain_id)
        return bytes(self.account.sign_transaction(transaction).raw_transaction)


def build_activation_transaction(
    program: Address, fee: int, signer: Signer, eth: BaseClient
) -> Dict:
    """Assemble the ``activateProgram`` transaction paying ``fee`` wei.

    Nonce, gas limit and EIP-1559 fee caps are filled from the node.

    :param program: canonical address of the program to activate
    :param fee: value attached to the transaction
    :param signer: the sender
    :param eth: JSON-RPC client
    :return: a transaction dict ready to be signed
    """
    transaction = {
        "from": signer.address,
        "to": to_rpc_address(ARB_WASM_ADDRESS),
        "value": fee,
        "data": encode_data(encode_activate_call(program)),
    }

    call = dict(transaction, value=clean_hex(fee))
    gas = eth.eth_estimateGas(call)
    nonce = eth.eth_getTransactionCount(signer.canonical_address, BLOCK_TAG_PENDING)
    max_priority_fee = eth.eth_maxPriorityFeePerGas()
    block = eth.eth_getBlockByNumber(BLOCK_TAG_LATEST, False)
    base_fee = hex_to_dec(block.get("baseFeePerGas", "0x0"))

    transaction.update(
        {
            "type": EIP1559_TX_TYPE,
            "chainId": signer.chain_id,
            "nonce": nonce,
            "gas": gas,
            "maxPriorityFeePerGas": max_priority_fee,
            "maxFeePerGas": 2 * base_fee + max_priority_fee,
        }
    )
    log.debug("Built activation transaction: %s", transaction)
    return transaction


def submit_activation(
    program: Address,
    fee: int,
    signer: Signer,
    eth: BaseClient,
    poll_interval=DEFAULT_POLL_INTERVAL,
) -> Dict:
    """Send the activation transaction and wait until it is mined.

    :param program: canonical address of the program to activate
    :param fee: data fee to pay, in wei
    :param signer: the sender
    :param eth: JSON-RPC client
    :param poll_interval: seconds between receipt polls
    :return: the transaction receipt
    """
    transaction = build_activation_transaction(program, fee, signer, eth)
    raw_transaction = signer.sign_transaction(transaction)

    tx_hash = eth.eth_sendRawTransaction(raw_transaction)
    log.info("Sent activation transaction %s", tx_hash)

    receipt = eth.wait_for_receipt(tx_hash, poll_interval)
    if receipt is None:
        raise ActivationNotConfirmed(tx_hash)
    return receipt
