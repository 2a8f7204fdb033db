from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from txbalancer.transaction import Value


class TxBalancerException(Exception):
    pass


class InvalidDataException(TxBalancerException):
    pass


class InvalidArgumentException(TxBalancerException):
    pass


class InvalidAddressInputException(TxBalancerException):
    pass


class DeserializeException(TxBalancerException):
    pass


class BalancingException(TxBalancerException):
    """Base class of failures returned by balancing operations."""

    pass


class NoCollateralAvailableException(BalancingException):
    pass


class UnconvertibleOutputException(BalancingException):
    pass


class InsufficientInputValueException(BalancingException):
    """Inputs cannot cover the value a transaction needs.

    Args:
        needed (Value): Value that had to be covered.
        got (Value): Value the inputs actually provide.
        message (str): Short description of the call site.
    """

    def __init__(self, needed: Value, got: Value, message: str = "Not enough inputs"):
        self.needed = needed
        self.got = got
        self.message = message
        super().__init__(
            f"{message}, needed: {needed.flatten().format()}, "
            f"got: {got.flatten().format()}"
        )
