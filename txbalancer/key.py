"""Ed25519 keys used to derive wallet addresses.

Payment and stake keys share one representation but are separate types: a signing key only derives the
verification key of its own kind, and addresses only accept each kind in its own slot.
"""

from __future__ import annotations

from typing import Optional, Type, TypeVar

from nacl.encoding import RawEncoder
from nacl.hash import blake2b
from nacl.signing import SigningKey as NACLSigningKey

from txbalancer.hash import VERIFICATION_KEY_HASH_SIZE, VerificationKeyHash
from txbalancer.serialization import Serializable, limit_primitive_type

__all__ = [
    "Key",
    "SigningKey",
    "VerificationKey",
    "PaymentSigningKey",
    "PaymentVerificationKey",
    "StakeSigningKey",
    "StakeVerificationKey",
]

K = TypeVar("K", bound="Key")


class Key(Serializable):
    """A class that holds a cryptographic key and some metadata. e.g. signing key, verification key."""

    KEY_TYPE = ""
    DESCRIPTION = ""

    def __init__(
        self,
        payload: bytes,
        key_type: Optional[str] = None,
        description: Optional[str] = None,
    ):
        self._payload = payload
        self._key_type = key_type or self.KEY_TYPE
        self._description = description or self.DESCRIPTION

    @property
    def payload(self) -> bytes:
        return self._payload

    @property
    def key_type(self) -> str:
        return self._key_type

    @property
    def description(self) -> str:
        return self._description

    def to_primitive(self) -> bytes:
        return self.payload

    @classmethod
    @limit_primitive_type(bytes)
    def from_primitive(cls: Type[K], value: bytes) -> K:
        return cls(value)

    def __bytes__(self):
        return self.payload

    def __eq__(self, other):
        if type(other) is not type(self):
            return False
        return self.payload == other.payload and self.key_type == other.key_type

    def __hash__(self):
        return hash((self.key_type, self.payload))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type='{self.key_type}', hex='{self.payload.hex()}')"


class VerificationKey(Key):
    def hash(self) -> VerificationKeyHash:
        """Compute a blake2b hash from the key

        Returns:
            VerificationKeyHash: Hash output in bytes.
        """
        return VerificationKeyHash(
            blake2b(self.payload, VERIFICATION_KEY_HASH_SIZE, encoder=RawEncoder)
        )


class SigningKey(Key):
    VERIFICATION_KEY_CLASS: Type[VerificationKey] = VerificationKey

    def to_verification_key(self) -> VerificationKey:
        verification_key = NACLSigningKey(self.payload).verify_key
        return self.VERIFICATION_KEY_CLASS(bytes(verification_key))

    @classmethod
    def generate(cls: Type[K]) -> K:
        signing_key = NACLSigningKey.generate()
        return cls(bytes(signing_key))

    def __repr__(self) -> str:
        # keep secrets out of logs
        return f"{self.__class__.__name__}(type='{self.key_type}', hash='{self.to_verification_key().hash()}')"


class PaymentVerificationKey(VerificationKey):
    KEY_TYPE = "PaymentVerificationKeyShelley_ed25519"
    DESCRIPTION = "Payment Verification Key"


class PaymentSigningKey(SigningKey):
    KEY_TYPE = "PaymentSigningKeyShelley_ed25519"
    DESCRIPTION = "Payment Signing Key"
    VERIFICATION_KEY_CLASS = PaymentVerificationKey

    def to_verification_key(self) -> PaymentVerificationKey:
        return super().to_verification_key()  # type: ignore[return-value]


class StakeVerificationKey(VerificationKey):
    KEY_TYPE = "StakeVerificationKeyShelley_ed25519"
    DESCRIPTION = "Stake Verification Key"


class StakeSigningKey(SigningKey):
    KEY_TYPE = "StakeSigningKeyShelley_ed25519"
    DESCRIPTION = "Stake Signing Key"
    VERIFICATION_KEY_CLASS = StakeVerificationKey

    def to_verification_key(self) -> StakeVerificationKey:
        return super().to_verification_key()  # type: ignore[return-value]

