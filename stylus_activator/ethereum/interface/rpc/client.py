import json
import logging
import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import Timeout as RequestsTimeout
from .exceptions import (
    ConnectionError,
    BadStatusCodeError,
    BadJsonError,
    BadResponseError,
    RpcErrorResponse,
)
from .base_client import BaseClient, NITRO_DEFAULT_RPC_PORT

log = logging.getLogger(__name__)

MAX_RETRIES = 3
JSON_MEDIA_TYPE = "application/json"
DEFAULT_TIMEOUT = 30

"""
This code is adapted from: https://github.com/ConsenSys/ethjsonrpc
"""


class EthJsonRpc(BaseClient):
    """
    Ethereum JSON-RPC client class
    """

    def __init__(
        self,
        endpoint="http://localhost:{}".format(NITRO_DEFAULT_RPC_PORT),
        timeout=DEFAULT_TIMEOUT,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = requests.Session()
        # Only connection setup is retried, a POST that reached the node is never resent
        self.session.mount(self.endpoint, HTTPAdapter(max_retries=MAX_RETRIES))

    def _call(self, method, params=None, _id=1):

        params = params or []
        data = {"jsonrpc": "2.0", "method": method, "params": params, "id": _id}
        headers = {"Content-Type": JSON_MEDIA_TYPE}
        log.debug("rpc send: %s" % json.dumps(data))
        try:
            r = self.session.post(
                self.endpoint,
                headers=headers,
                data=json.dumps(data),
                timeout=self.timeout,
            )
        except (RequestsConnectionError, RequestsTimeout) as e:
            raise ConnectionError(str(e))
        status_ok = r.status_code // 100 == 2
        try:
            response = r.json()
            log.debug("rpc response: %s" % response)
        except ValueError:
            if not status_ok:
                raise BadStatusCodeError(r.status_code)
            raise BadJsonError(r.text)
        if not isinstance(response, dict):
            raise BadResponseError(response)

        # Nodes may pair a JSON-RPC error body with a non-2xx status
        error = response.get("error")
        if isinstance(error, dict):
            raise RpcErrorResponse(
                error.get("code"), str(error.get("message", "")), error.get("data")
            )
        if not status_ok:
            raise BadStatusCodeError(r.status_code)
        try:
            return response["result"]
        except KeyError:
            raise BadResponseError(response)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
