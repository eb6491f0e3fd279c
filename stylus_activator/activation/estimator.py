"""This module estimates the activation data fee of a Stylus program by
simulating ``activateProgram`` with a state-overridden ``eth_call``.

The simulation funds a synthetic caller with an unbounded balance and injects
the program's current bytecode, so the estimate depends neither on the
caller's real balance nor on how far the node has finalized the deployment.
"""
import logging
from typing import Dict, Optional

from eth_typing import Address

from stylus_activator.abi.arbwasm import (
    ARB_WASM_ADDRESS,
    ActivationResult,
    decode_activate_return,
    encode_activate_call,
)
from stylus_activator.ethereum.interface.rpc.base_client import BaseClient
from stylus_activator.ethereum.interface.rpc.constants import BLOCK_TAG_LATEST
from stylus_activator.ethereum.interface.rpc.exceptions import RpcErrorResponse
from stylus_activator.ethereum.interface.rpc.utils import (
    UINT256_MAX,
    clean_hex,
    encode_data,
    ether_to_wei,
)
from stylus_activator.ethereum.util import ZERO_ADDRESS, safe_decode, to_rpc_address
from stylus_activator.exceptions import MalformedRpcError, SimulationReverted

log = logging.getLogger(__name__)

# activateProgram is payable, the simulation attaches one ether
SIMULATION_CALL_VALUE = ether_to_wei(1)


class AccountOverride:
    """Replacement balance and/or code of one account for a single call."""

    def __init__(self, balance: Optional[int] = None, code: Optional[bytes] = None):
        self.balance = balance
        self.code = code

    def to_rpc(self) -> Dict[str, str]:
        fields = {}
        if self.balance is not None:
            fields["balance"] = clean_hex(self.balance)
        if self.code is not None:
            fields["code"] = encode_data(self.code)
        return fields


class StateOverride:
    """The account overrides applied to one simulated call.

    Accounts that are not listed keep the state the node sees at the queried
    block.
    """

    def __init__(self):
        self.accounts = {}  # type: Dict[Address, AccountOverride]

    def account(self, address: Address) -> AccountOverride:
        """Return the override record of ``address``, creating an empty one."""
        if address not in self.accounts:
            self.accounts[address] = AccountOverride()
        return self.accounts[address]

    def to_rpc(self) -> Dict[str, Dict[str, str]]:
        return {
            to_rpc_address(address): override.to_rpc()
            for address, override in self.accounts.items()
        }


class CallRequest:
    """A message call, serialized to the JSON-RPC call object."""

    def __init__(
        self,
        to: Address,
        data: bytes,
        value: int = 0,
        from_: Optional[Address] = None,
    ):
        self.from_ = from_
        self.to = to
        self.value = value
        self.data = data

    def to_rpc(self) -> Dict[str, str]:
        call = {
            "to": to_rpc_address(self.to),
            "value": clean_hex(self.value),
            "data": encode_data(self.data),
        }
        if self.from_ is not None:
            call["from"] = to_rpc_address(self.from_)
        return call


class CallOutcome:
    """Base class of the two possible results of a simulated call."""

    reverted = False


class CallSuccess(CallOutcome):
    def __init__(self, data: bytes):
        self.data = data


class CallReverted(CallOutcome):
    reverted = True

    def __init__(self, data: bytes, message: str):
        self.data = data
        self.message = message


def _decode_revert_data(error: RpcErrorResponse) -> bytes:
    """Extract the revert payload carried by a JSON-RPC error object."""
    if error.data is None:
        return b""
    if not isinstance(error.data, str):
        raise MalformedRpcError(
            "failed to decode RPC failure: {!r}".format(error.data)
        )
    try:
        return safe_decode(error.data)
    except ValueError:
        raise MalformedRpcError(
            "failed to decode RPC failure: {!r}".format(error.data)
        )


def funded_eth_call(
    request: CallRequest, state_override: StateOverride, eth: BaseClient
) -> CallOutcome:
    """Run ``request`` with the zero address funded with the maximum balance.

    Transport failures propagate unchanged. A JSON-RPC error object is a
    revert and is returned as :class:`CallReverted`.

    :param request: the call to simulate
    :param state_override: overrides to apply, extended with the funded caller
    :param eth: JSON-RPC client
    :return: the classified outcome
    """
    state_override.account(ZERO_ADDRESS).balance = UINT256_MAX

    try:
        data = eth.eth_call(
            request.to_rpc(), BLOCK_TAG_LATEST, state_override.to_rpc()
        )
    except RpcErrorResponse as error:
        log.debug("eth_call reverted: %s (data: %r)", error.message, error.data)
        return CallReverted(_decode_revert_data(error), error.message)
    return CallSuccess(data)


def simulate_activation(program: Address, eth: BaseClient) -> ActivationResult:
    """Simulate ``activateProgram(program)`` and return the decoded result.

    :param program: canonical address of the deployed program
    :param eth: JSON-RPC client
    :return: Stylus version and data fee the activation would report
    """
    code = eth.eth_getCode(program, BLOCK_TAG_LATEST)
    log.debug("Fetched %d bytes of code at %s", len(code), to_rpc_address(program))

    state_override = StateOverride()
    state_override.account(program).code = code
    request = CallRequest(
        to=ARB_WASM_ADDRESS,
        data=encode_activate_call(program),
        value=SIMULATION_CALL_VALUE,
        from_=ZERO_ADDRESS,
    )

    outcome = funded_eth_call(request, state_override, eth)
    if outcome.reverted:
        raise SimulationReverted(outcome.message, outcome.data)
    return decode_activate_return(outcome.data)


def estimate_activation_fee(program: Address, eth: BaseClient) -> int:
    """Estimate the data fee, in wei, needed to activate ``program``.

    :param program: canonical address of the deployed program
    :param eth: JSON-RPC client
    :return: the estimated data fee
    """
    return simulate_activation(program, eth).data_fee
