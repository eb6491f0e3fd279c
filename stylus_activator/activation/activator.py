"""Activates a Stylus program at a given address.

The activation data fee is estimated from the ArbWasm precompile through a
spoofed ``eth_call``, optionally bumped, then paid by a transaction calling
``activateProgram``.
"""
import logging
from typing import Dict, Optional

from stylus_activator.activation.estimator import simulate_activation
from stylus_activator.activation.fees import bump_fee
from stylus_activator.activation.submitter import Signer, submit_activation
from stylus_activator.activator_config import ActivatorConfig
from stylus_activator.ethereum.interface.rpc.client import EthJsonRpc
from stylus_activator.ethereum.interface.rpc.utils import UINT256_MAX, wei_to_ether
from stylus_activator.ethereum.util import to_rpc_address
from stylus_activator.exceptions import (
    ActivatorBaseException,
    EstimationError,
    FeeOverflowError,
)

log = logging.getLogger(__name__)

RECEIPT_STATUS_FAILED = "0x0"


def activate_stylus_program(
    config: ActivatorConfig, eth: Optional[EthJsonRpc] = None
) -> Optional[Dict]:
    """Estimate, bump and pay the activation fee of ``config.program``.

    :param config: a validated configuration
    :param eth: client to use, one is created from ``config.endpoint`` and
        closed afterwards when omitted
    :return: the activation receipt, None on a dry run
    """
    if eth is None:
        with EthJsonRpc(config.endpoint) as eth:
            return activate_stylus_program(config, eth)

    program = config.program
    chain_id = eth.eth_chainId()
    log.debug("Connected to chain %d", chain_id)

    try:
        result = simulate_activation(program, eth)
    except ActivatorBaseException as e:
        raise EstimationError(
            "failed to check activation via spoofed eth_call: {}".format(e)
        ) from e
    data_fee = result.data_fee
    log.info(
        "Obtained estimated activation data fee %d wei (%s ETH), stylus version %d",
        data_fee,
        wei_to_ether(data_fee),
        result.version,
    )

    if config.bump_fee_percent is not None:
        log.info(
            "Bumping estimated activation data fee by %d%%", config.bump_fee_percent
        )
        data_fee = bump_fee(data_fee, config.bump_fee_percent)
        if data_fee > UINT256_MAX:
            raise FeeOverflowError(
                "Bumped activation data fee {} wei exceeds the uint256 range".format(
                    data_fee
                )
            )

    if config.dry_run:
        log.info("Dry run, not sending activation with value %d wei", data_fee)
        return None

    signer = Signer.from_key(config.private_key, chain_id)
    receipt = submit_activation(
        program, data_fee, signer, eth, poll_interval=config.poll_interval
    )
    if receipt.get("status") == RECEIPT_STATUS_FAILED:
        log.warning(
            "Activation transaction %s for program %s was mined but reverted",
            receipt["transactionHash"],
            to_rpc_address(program),
        )
    else:
        log.info(
            "Successfully activated program %s with tx %s",
            to_rpc_address(program),
            receipt["transactionHash"],
        )
    log.debug("Receipt: %s", receipt)
    return receipt
