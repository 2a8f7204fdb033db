"""A module that contains address-related classes.

Address layout follows
`CIP-0019 <https://github.com/cardano-foundation/CIPs/tree/master/CIP-0019>`_ for shelley addresses with key or
script credentials. Balancing only ever looks at the payment credential of an address.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional, Type, Union

from txbalancer.exception import DeserializeException, InvalidAddressInputException
from txbalancer.hash import VERIFICATION_KEY_HASH_SIZE, ScriptHash, VerificationKeyHash
from txbalancer.network import Network
from txbalancer.serialization import Serializable, limit_primitive_type

if TYPE_CHECKING:
    from txbalancer.key import PaymentVerificationKey, StakeVerificationKey

__all__ = ["AddressType", "Address", "Credential"]

Credential = Union[VerificationKeyHash, ScriptHash]
"""A payment or stake credential: either a key hash or a script hash."""


class AddressType(Enum):
    """
    Address type definition.
    """

    KEY_KEY = 0b0000
    """Payment key hash + Stake key hash"""

    SCRIPT_KEY = 0b0001
    """Script hash + Stake key hash"""

    KEY_SCRIPT = 0b0010
    """Payment key hash + Script hash"""

    SCRIPT_SCRIPT = 0b0011
    """Script hash + Script hash"""

    KEY_NONE = 0b0110
    """Payment key hash only"""

    SCRIPT_NONE = 0b0111
    """Script hash for payment part only"""

    NONE_KEY = 0b1110
    """Stake key hash for stake part only"""

    NONE_SCRIPT = 0b1111
    """Script hash for stake part only"""


_TYPES_BY_PARTS = {
    (VerificationKeyHash, VerificationKeyHash): AddressType.KEY_KEY,
    (ScriptHash, VerificationKeyHash): AddressType.SCRIPT_KEY,
    (VerificationKeyHash, ScriptHash): AddressType.KEY_SCRIPT,
    (ScriptHash, ScriptHash): AddressType.SCRIPT_SCRIPT,
    (VerificationKeyHash, type(None)): AddressType.KEY_NONE,
    (ScriptHash, type(None)): AddressType.SCRIPT_NONE,
    (type(None), VerificationKeyHash): AddressType.NONE_KEY,
    (type(None), ScriptHash): AddressType.NONE_SCRIPT,
}

_PARTS_BY_TYPE = {v: k for k, v in _TYPES_BY_PARTS.items()}


class Address(Serializable):
    """A shelley address. It consists of two parts: payment part and staking part.
        Either of the parts could be None, but they cannot be None at the same time.

    Args:
        payment_part (Union[VerificationKeyHash, ScriptHash, None]): Payment part of the address.
        staking_part (Union[VerificationKeyHash, ScriptHash, None]): Staking part of the address.
        network (Network): Type of network the address belongs to.
    """

    def __init__(
        self,
        payment_part: Optional[Credential] = None,
        staking_part: Optional[Credential] = None,
        network: Network = Network.MAINNET,
    ):
        self._payment_part = payment_part
        self._staking_part = staking_part
        self._network = network
        self._address_type = self._infer_address_type()
        self._header_byte = self._compute_header_byte()

    def _infer_address_type(self) -> AddressType:
        """Guess address type from the combination of payment part and staking part."""
        address_type = _TYPES_BY_PARTS.get(
            (type(self.payment_part), type(self.staking_part))
        )
        if address_type is None:
            raise InvalidAddressInputException(
                f"Cannot construct a shelley address from a combination of "
                f"payment part: {self.payment_part} and "
                f"stake part: {self.staking_part}"
            )
        return address_type

    @classmethod
    def from_verification_keys(
        cls,
        payment_key: PaymentVerificationKey,
        stake_key: Optional[StakeVerificationKey] = None,
        network: Network = Network.MAINNET,
    ) -> Address:
        """Derive a key address from a payment key and an optional stake key.

        Raises:
            InvalidAddressInputException: When a stake key is given in the payment slot or the other way round.
        """
        from txbalancer.key import PaymentVerificationKey, StakeVerificationKey

        if not isinstance(payment_key, PaymentVerificationKey):
            raise InvalidAddressInputException(
                f"Expect a payment verification key, got {type(payment_key)}"
            )
        if stake_key is not None and not isinstance(stake_key, StakeVerificationKey):
            raise InvalidAddressInputException(
                f"Expect a stake verification key, got {type(stake_key)}"
            )
        return cls(
            payment_key.hash(),
            stake_key.hash() if stake_key is not None else None,
            network,
        )

    @property
    def payment_part(self) -> Optional[Credential]:
        """Payment part of the address."""
        return self._payment_part

    @property
    def staking_part(self) -> Optional[Credential]:
        """Staking part of the address."""
        return self._staking_part

    @property
    def network(self) -> Network:
        """Network this address belongs to."""
        return self._network

    @property
    def address_type(self) -> AddressType:
        """Address type."""
        return self._address_type

    @property
    def header_byte(self) -> bytes:
        """Header byte that identifies the type of address."""
        return self._header_byte

    def _compute_header_byte(self) -> bytes:
        return (self.address_type.value << 4 | self.network.value).to_bytes(
            1, byteorder="big"
        )

    def __bytes__(self):
        payment = bytes(self.payment_part) if self.payment_part else bytes()
        staking = bytes(self.staking_part) if self.staking_part else bytes()
        return self.header_byte + payment + staking

    def to_primitive(self) -> bytes:
        return bytes(self)

    @classmethod
    @limit_primitive_type(bytes, str)
    def from_primitive(cls: Type[Address], value: Union[bytes, str]) -> Address:
        """Restore an address from its raw bytes or their hex string.

        Examples:
            >>> khash = VerificationKeyHash(bytes.fromhex("cc30497f4ff962f4c1dca54cceefe39f86f1d7179668009f8eb71e59"))
            >>> addr = Address(khash, network=Network.TESTNET)
            >>> Address.from_primitive(bytes(addr)) == addr
            True
        """
        if isinstance(value, str):
            try:
                value = bytes.fromhex(value)
            except ValueError as e:
                raise DeserializeException(f"Invalid address hex string: {e}")
        if not value:
            raise DeserializeException("Cannot deserialize an empty address.")

        header = value[0]
        payload = value[1:]
        try:
            addr_type = AddressType((header & 0xF0) >> 4)
            network = Network(header & 0x0F)
        except ValueError as e:
            raise DeserializeException(f"Unsupported address header {header}: {e}")

        payment_type, staking_type = _PARTS_BY_TYPE[addr_type]
        try:
            if payment_type is type(None):
                return cls(None, staking_type(payload), network)
            if staking_type is type(None):
                return cls(payment_type(payload), None, network)
            return cls(
                payment_type(payload[:VERIFICATION_KEY_HASH_SIZE]),
                staking_type(payload[VERIFICATION_KEY_HASH_SIZE:]),
                network,
            )
        except AssertionError as e:
            raise DeserializeException(f"Invalid address payload {payload.hex()}: {e}")

    def __eq__(self, other):
        if not isinstance(other, Address):
            return False
        return (
            self.payment_part == other.payment_part
            and self.staking_part == other.staking_part
            and self.network == other.network
        )

    def __hash__(self):
        return hash(bytes(self))

    def __repr__(self):
        return f"Address(hex='{bytes(self).hex()}')"

    def __str__(self):
        return bytes(self).hex()
