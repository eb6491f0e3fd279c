import pytest

from stylus_activator.abi.arbwasm import ActivationResult, encode_activate_call
from stylus_activator.activation.estimator import (
    SIMULATION_CALL_VALUE,
    CallRequest,
    StateOverride,
    estimate_activation_fee,
    funded_eth_call,
    simulate_activation,
)
from stylus_activator.ethereum.interface.rpc.exceptions import (
    BadResponseError,
    ConnectionError,
    RpcErrorResponse,
)
from stylus_activator.ethereum.util import ZERO_ADDRESS, to_canonical_address
from stylus_activator.exceptions import (
    DecodeError,
    MalformedRpcError,
    SimulationReverted,
)
from tests import FakeEthClient, TEST_PROGRAM, encode_return_tuple

PROGRAM = to_canonical_address(TEST_PROGRAM)
PROGRAM_CODE = bytes.fromhex("eff0000000aa")
ARB_WASM = "0x0000000000000000000000000000000000000071"
ZERO = "0x" + "00" * 20


def _eth(call_result):
    return FakeEthClient(
        {"eth_getCode": "0x" + PROGRAM_CODE.hex(), "eth_call": call_result}
    )


def test_estimate_activation_fee():
    eth = _eth("0x" + encode_return_tuple(2, 999000).hex())
    assert estimate_activation_fee(PROGRAM, eth) == 999000


def test_simulate_activation_returns_version():
    eth = _eth("0x" + encode_return_tuple(1, 12345).hex())
    assert simulate_activation(PROGRAM, eth) == ActivationResult(1, 12345)


def test_simulated_call_shape():
    eth = _eth("0x" + encode_return_tuple(1, 1).hex())
    estimate_activation_fee(PROGRAM, eth)

    assert eth.params_of("eth_getCode") == [[TEST_PROGRAM, "latest"]]
    (params,) = eth.params_of("eth_call")
    call, block, overrides = params
    assert call == {
        "from": ZERO,
        "to": ARB_WASM,
        "value": hex(10 ** 18),
        "data": "0x" + encode_activate_call(PROGRAM).hex(),
    }
    assert block == "latest"
    assert overrides == {
        ZERO: {"balance": "0x" + "f" * 64},
        TEST_PROGRAM: {"code": "0x" + PROGRAM_CODE.hex()},
    }


def test_estimate_is_idempotent():
    eth = _eth("0x" + encode_return_tuple(2, 42).hex())
    first = estimate_activation_fee(PROGRAM, eth)
    second = estimate_activation_fee(PROGRAM, eth)
    assert first == second == 42
    call_params = eth.params_of("eth_call")
    assert call_params[0] == call_params[1]


def test_revert_with_hex_data():
    eth = _eth(
        RpcErrorResponse(
            3, "execution reverted: already activated", "0x6f7e2d9a" + "00" * 28
        )
    )
    with pytest.raises(SimulationReverted) as e:
        estimate_activation_fee(PROGRAM, eth)
    assert e.value.message == "execution reverted: already activated"
    assert e.value.data == bytes.fromhex("6f7e2d9a") + b"\x00" * 28


def test_revert_without_data_is_an_empty_payload():
    eth = _eth(RpcErrorResponse(-32000, "execution reverted", None))
    with pytest.raises(SimulationReverted) as e:
        estimate_activation_fee(PROGRAM, eth)
    assert e.value.data == b""


@pytest.mark.parametrize("data", [{"reason": "x"}, 12, ["0x00"], "0xnothex"])
def test_malformed_error_data(data):
    eth = _eth(RpcErrorResponse(3, "execution reverted", data))
    with pytest.raises(MalformedRpcError):
        estimate_activation_fee(PROGRAM, eth)


def test_transport_error_propagates():
    eth = _eth(ConnectionError("refused"))
    with pytest.raises(ConnectionError):
        estimate_activation_fee(PROGRAM, eth)


def test_transport_error_on_code_fetch_propagates():
    eth = FakeEthClient({"eth_getCode": ConnectionError("refused")})
    with pytest.raises(ConnectionError):
        estimate_activation_fee(PROGRAM, eth)
    assert eth.params_of("eth_call") == []


def test_bad_return_data():
    eth = _eth("0x1234")
    with pytest.raises(DecodeError):
        estimate_activation_fee(PROGRAM, eth)


def test_funded_eth_call_adds_caller_balance():
    eth = FakeEthClient({"eth_call": "0xbeef"})
    state_override = StateOverride()
    request = CallRequest(to=PROGRAM, data=b"", value=SIMULATION_CALL_VALUE)

    outcome = funded_eth_call(request, state_override, eth)

    assert not outcome.reverted
    assert outcome.data == b"\xbe\xef"
    assert state_override.accounts[ZERO_ADDRESS].balance == 2 ** 256 - 1
    (params,) = eth.params_of("eth_call")
    assert "from" not in params[0]


def test_funded_eth_call_reports_revert():
    eth = FakeEthClient({"eth_call": RpcErrorResponse(3, "boom", "0x01")})
    outcome = funded_eth_call(CallRequest(to=PROGRAM, data=b""), StateOverride(), eth)
    assert outcome.reverted
    assert outcome.message == "boom"
    assert outcome.data == b"\x01"


def test_state_override_serializes_only_set_fields():
    state_override = StateOverride()
    state_override.account(PROGRAM).code = b""
    state_override.account(ZERO_ADDRESS)
    assert state_override.to_rpc() == {TEST_PROGRAM: {"code": "0x"}, ZERO: {}}


@pytest.mark.parametrize("result", [None, "0xabc", "0xzz"])
def test_non_hex_call_result_is_a_bad_response(result):
    eth = _eth(result)
    with pytest.raises(BadResponseError):
        estimate_activation_fee(PROGRAM, eth)


@pytest.mark.parametrize("result", [None, "0xabc", "0xzz"])
def test_non_hex_code_is_a_bad_response(result):
    eth = FakeEthClient({"eth_getCode": result})
    with pytest.raises(BadResponseError):
        estimate_activation_fee(PROGRAM, eth)
    assert eth.params_of("eth_call") == []
