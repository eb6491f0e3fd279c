from pathlib import Path
from unittest import TestCase

import eth_abi

from stylus_activator.ethereum.interface.rpc.base_client import BaseClient

TESTS_DIR = Path(__file__).parent
PROJECT_DIR = TESTS_DIR.parent
TESTDATA = TESTS_DIR / "testdata"
TESTDATA_CONFIG_INPUTS = TESTDATA / "activator_config_inputs"

# Well known development key, never holds funds
TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TEST_PROGRAM = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


def encode_return_tuple(version, data_fee):
    """Encode an ``activateProgram`` return value the way the precompile does."""
    return eth_abi.encode(["uint16", "uint256"], [version, data_fee])


class FakeEthClient(BaseClient):
    """In-memory JSON-RPC client.

    ``responses`` maps a method name to the raw ``result`` to return, to an
    exception instance to raise, or to a callable receiving the params.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def _call(self, method, params=None, _id=1):
        params = params or []
        self.calls.append((method, params))
        response = self.responses[method]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(params)
        return response

    def params_of(self, method):
        return [params for called, params in self.calls if called == method]

    def close(self):
        pass


class BaseTestCase(TestCase):
    def setUp(self):
        """

        """
        self.eth = FakeEthClient()
