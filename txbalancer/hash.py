"""Hash types that identify keys, scripts, transactions and datums.

Each hash kind is its own nominal type. Two hashes of different kinds never compare equal, even when
their bytes coincide, so a minting policy hash cannot stand in for a validator hash by accident.
"""

from typing import Type, TypeVar, Union

from txbalancer.serialization import Serializable, limit_primitive_type

__all__ = [
    "VERIFICATION_KEY_HASH_SIZE",
    "SCRIPT_HASH_SIZE",
    "TRANSACTION_HASH_SIZE",
    "DATUM_HASH_SIZE",
    "ConstrainedBytes",
    "VerificationKeyHash",
    "ScriptHash",
    "MintingPolicyHash",
    "ValidatorHash",
    "TransactionId",
    "DatumHash",
]

VERIFICATION_KEY_HASH_SIZE = 28
SCRIPT_HASH_SIZE = 28
TRANSACTION_HASH_SIZE = 32
DATUM_HASH_SIZE = 32


T = TypeVar("T", bound="ConstrainedBytes")


class ConstrainedBytes(Serializable):
    """A wrapped class of bytes with constrained size.

    Args:
        payload (bytes): Hash in bytes.
    """

    __slots__ = "_payload"

    MAX_SIZE = 32
    MIN_SIZE = 0

    def __init__(self, payload: bytes):
        assert self.MIN_SIZE <= len(payload) <= self.MAX_SIZE, (
            f"Invalid byte size: {len(payload)} for class {self.__class__}, "
            f"expected size range: [{self.MIN_SIZE}, {self.MAX_SIZE}]"
        )
        self._payload = payload

    def __bytes__(self):
        return self.payload

    def __hash__(self):
        return hash(self.payload)

    @property
    def payload(self) -> bytes:
        return self._payload

    def to_primitive(self) -> bytes:
        return self.payload

    @classmethod
    @limit_primitive_type(bytes, str)
    def from_primitive(cls: Type[T], value: Union[bytes, str]) -> T:
        if isinstance(value, str):
            value = bytes.fromhex(value)
        return cls(value)

    def __eq__(self, other):
        if type(other) is type(self):
            return self.payload == other.payload
        else:
            return False

    def __repr__(self):
        return f"{self.__class__.__name__}(hex='{self.payload.hex()}')"

    def __str__(self):
        return self.payload.hex()


class VerificationKeyHash(ConstrainedBytes):
    """Hash of a verification key."""

    MAX_SIZE = MIN_SIZE = VERIFICATION_KEY_HASH_SIZE


class ScriptHash(ConstrainedBytes):
    """Hash of a script. Also used as the policy id of a native asset."""

    MAX_SIZE = MIN_SIZE = SCRIPT_HASH_SIZE


class MintingPolicyHash(ConstrainedBytes):
    """Hash of a minting policy script."""

    MAX_SIZE = MIN_SIZE = SCRIPT_HASH_SIZE

    def to_policy_id(self) -> ScriptHash:
        """Policy id under which the assets minted by this policy are recorded."""
        return ScriptHash(self.payload)


class ValidatorHash(ConstrainedBytes):
    """Hash of a validator script that locks outputs."""

    MAX_SIZE = MIN_SIZE = SCRIPT_HASH_SIZE

    def to_script_hash(self) -> ScriptHash:
        """Script hash used as the payment credential of a script address."""
        return ScriptHash(self.payload)


class TransactionId(ConstrainedBytes):
    """Hash of a transaction."""

    MAX_SIZE = MIN_SIZE = TRANSACTION_HASH_SIZE


class DatumHash(ConstrainedBytes):
    """Hash of a datum"""

    MAX_SIZE = MIN_SIZE = DATUM_HASH_SIZE
