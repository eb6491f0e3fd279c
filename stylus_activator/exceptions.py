"""This module contains general exceptions used by the activator."""


class ActivatorBaseException(Exception):
    """The activator exception base type."""

    pass


class CriticalError(ActivatorBaseException):
    """An exception denoting invalid settings that prevent any work from
    starting."""

    pass


class EstimationError(ActivatorBaseException):
    """Raised when the activation data fee could not be estimated. The
    underlying failure is chained as ``__cause__``."""

    pass


class MalformedRpcError(ActivatorBaseException):
    """The node returned a JSON-RPC error object whose ``data`` member has an
    unexpected shape."""

    pass


class DecodeError(ActivatorBaseException):
    """A successful call returned a payload that is not a valid
    ``(uint16, uint256)`` tuple."""

    pass


class SimulationReverted(ActivatorBaseException):
    """The state-overridden activation call reverted."""

    def __init__(self, message: str, data: bytes = b"") -> None:
        super().__init__(message)
        self.message = message
        self.data = data


class ActivationNotConfirmed(ActivatorBaseException):
    """The activation transaction was broadcast but no receipt materialized."""

    def __init__(self, tx_hash: str) -> None:
        super().__init__(
            "Activation transaction {} was not confirmed".format(tx_hash)
        )
        self.tx_hash = tx_hash


class FeeOverflowError(ActivatorBaseException):
    """The bumped activation fee does not fit in a uint256 value."""

    pass
