"""This module contains exceptions regarding JSON-RPC communication."""
from stylus_activator.exceptions import ActivatorBaseException


class EthJsonRpcError(ActivatorBaseException):
    """The JSON-RPC base exception type."""

    pass


class TransportError(EthJsonRpcError):
    """An RPC exception denoting that no usable JSON-RPC response was
    received. These are safe to retry."""

    pass


class ConnectionError(TransportError):
    """An RPC exception denoting there was an error in connecting to the RPC
    instance."""

    pass


class BadStatusCodeError(TransportError):
    """An RPC exception denoting a bad status code returned by the RPC
    instance."""

    pass


class BadJsonError(TransportError):
    """An RPC exception denoting that the RPC instance returned a bad JSON
    object."""

    pass


class BadResponseError(TransportError):
    """An RPC exception denoting that the RPC instance returned a response
    carrying neither a result nor an error object."""

    pass


class RpcErrorResponse(EthJsonRpcError):
    """The RPC instance answered with a structured JSON-RPC error object.

    ``data`` is kept exactly as the node sent it, it may be missing (None),
    a hex string or any other JSON value.
    """

    def __init__(self, code, message, data=None):
        super().__init__("{} (code {})".format(message, code))
        self.code = code
        self.message = message
        self.data = data
