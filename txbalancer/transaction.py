"""Definitions of transaction-related data types, including the multi-asset value algebra."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from functools import total_ordering
from typing import (
    Callable,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    Type,
    Union,
)

from pprintpp import pformat

from txbalancer.address import Address
from txbalancer.exception import InvalidDataException
from txbalancer.hash import (
    ConstrainedBytes,
    DatumHash,
    ScriptHash,
    TransactionId,
    VerificationKeyHash,
)
from txbalancer.network import Network
from txbalancer.serialization import (
    ArraySerializable,
    DictSerializable,
    MapSerializable,
    limit_primitive_type,
)
from txbalancer.types import typechecked

__all__ = [
    "TransactionInput",
    "AssetName",
    "Asset",
    "MultiAsset",
    "Value",
    "FlattenedValue",
    "TransactionOutput",
    "UTxO",
    "UTxOSet",
    "TransactionBody",
    "sum_values",
]


@total_ordering
@dataclass(repr=False)
class TransactionInput(ArraySerializable):
    """Reference to an output of a previous transaction.

    Inputs are ordered by transaction id bytes first and output index second.
    """

    transaction_id: TransactionId

    index: int

    def __hash__(self):
        return hash((self.transaction_id.payload, self.index))

    def __lt__(self, other: TransactionInput) -> bool:
        if not isinstance(other, TransactionInput):
            return NotImplemented
        return (self.transaction_id.payload, self.index) < (
            other.transaction_id.payload,
            other.index,
        )

    def __repr__(self):
        return f"{self.transaction_id}#{self.index}"


class AssetName(ConstrainedBytes):
    MAX_SIZE = 32

    def __repr__(self):
        return f"AssetName({self.payload})"


@typechecked
class Asset(DictSerializable):
    KEY_TYPE = AssetName

    VALUE_TYPE = int

    def normalize(self) -> Asset:
        """Normalize the Asset by removing zero values."""
        for k, v in list(self.items()):
            if v == 0:
                self.pop(k)
        return self

    def _combine(self, other: Asset, sign: int) -> Asset:
        result = deepcopy(self)
        for name, quantity in other.items():
            result[name] = result.get(name, 0) + sign * quantity
        return result.normalize()

    def __add__(self, other: Asset) -> Asset:
        return self._combine(other, 1)

    def __sub__(self, other: Asset) -> Asset:
        return self._combine(other, -1)

    def __eq__(self, other):
        if not isinstance(other, Asset):
            return False
        return (self - other).is_zero()

    def is_zero(self) -> bool:
        return all(v == 0 for v in self.values())

    def __ge__(self, other: Asset) -> bool:
        return all(v >= 0 for v in (self - other).values())

    def __le__(self, other: Asset) -> bool:
        return other >= self

    def __gt__(self, other: Asset) -> bool:
        return self >= other and self != other

    def __lt__(self, other: Asset) -> bool:
        return self <= other and self != other

    @classmethod
    @limit_primitive_type(dict)
    def from_primitive(cls: Type[Asset], value: dict) -> Asset:
        return super().from_primitive(value).normalize()

    def to_shallow_primitive(self) -> dict:
        return {k: v for k, v in self.items() if v != 0}


@typechecked
class MultiAsset(DictSerializable):
    """Native asset quantities keyed by policy id, then by asset name.

    Quantities are signed so that differences of multi-assets stay representable. Missing entries count as zero.
    """

    KEY_TYPE = ScriptHash

    VALUE_TYPE = Asset

    def normalize(self) -> MultiAsset:
        """Normalize the MultiAsset by removing zero values."""
        for k, v in list(self.items()):
            v.normalize()
            if len(v) == 0:
                self.pop(k)
        return self

    def _combine(self, other: MultiAsset, sign: int) -> MultiAsset:
        result = deepcopy(self)
        for policy_id, assets in other.items():
            current = result.get(policy_id, Asset())
            result[policy_id] = current + assets if sign > 0 else current - assets
        return result.normalize()

    def __add__(self, other: MultiAsset) -> MultiAsset:
        return self._combine(other, 1)

    def __sub__(self, other: MultiAsset) -> MultiAsset:
        return self._combine(other, -1)

    def __eq__(self, other):
        if not isinstance(other, MultiAsset):
            return False
        return (self - other).count(lambda p, n, v: v != 0) == 0

    def __ge__(self, other: MultiAsset) -> bool:
        return (self - other).count(lambda p, n, v: v < 0) == 0

    def __le__(self, other: MultiAsset) -> bool:
        return other >= self

    def __gt__(self, other: MultiAsset) -> bool:
        return self >= other and self != other

    def __lt__(self, other: MultiAsset) -> bool:
        return self <= other and self != other

    def filter(
        self, criteria: Callable[[ScriptHash, AssetName, int], bool]
    ) -> MultiAsset:
        """Filter items by criteria.

        Args:
            criteria: A function that takes in three input arguments (policy_id, asset_name, amount) and returns a
                bool. If returned value is True, then the asset will be kept, otherwise discarded.

        Returns:
            A new filtered MultiAsset object.
        """
        new_multi_asset = MultiAsset()
        for policy_id, asset_name, quantity in self.triples():
            if criteria(policy_id, asset_name, quantity):
                if policy_id not in new_multi_asset:
                    new_multi_asset[policy_id] = Asset()
                new_multi_asset[policy_id][asset_name] = quantity
        return new_multi_asset

    def count(self, criteria: Callable[[ScriptHash, AssetName, int], bool]) -> int:
        """Count number of distinct assets that satisfy a certain criteria.

        Args:
            criteria: A function that takes in three input arguments (policy_id, asset_name, amount) and returns a
                bool.

        Returns:
            int: Total number of distinct assets that satisfy the criteria.
        """
        return sum(1 for p, n, v in self.triples() if criteria(p, n, v))

    def triples(self) -> Iterator[Tuple[ScriptHash, AssetName, int]]:
        for policy_id, assets in self.items():
            for asset_name, quantity in assets.items():
                yield policy_id, asset_name, quantity

    @classmethod
    @limit_primitive_type(dict)
    def from_primitive(cls: Type[MultiAsset], value: dict) -> MultiAsset:
        return super().from_primitive(value).normalize()

    def to_shallow_primitive(self) -> dict:
        return dict(deepcopy(self).normalize().items())


class FlattenedValue:
    """A lazy, restartable view of a :class:`Value` as ``(policy_id, asset_name, quantity)`` triples.

    Ada comes first as ``(None, None, coin)`` when the coin amount is not zero. Iterating twice walks the value
    twice, so the view is safe to log after it has been consumed.
    """

    def __init__(self, value: Value):
        self._value = value

    def __iter__(
        self,
    ) -> Iterator[Tuple[Optional[ScriptHash], Optional[AssetName], int]]:
        if self._value.coin:
            yield None, None, self._value.coin
        yield from self._value.multi_asset.triples()

    def format(self) -> str:
        """Render the triples as a list, with hex policy ids and asset names.

        Examples:
            >>> Value(3200000).flatten().format()
            "[('', '', 3200000)]"
        """
        return pformat(
            [
                (str(p) if p else "", n.payload.hex() if n else "", q)
                for p, n, q in self
            ]
        )


@typechecked
@dataclass(repr=False)
class Value(ArraySerializable):
    coin: int = 0
    """Amount of lovelace"""

    multi_asset: MultiAsset = field(default_factory=MultiAsset)
    """Native assets carried along with the lovelace"""

    def __add__(self, other: Union[Value, int]) -> Value:
        other = _as_value(other)
        return Value(self.coin + other.coin, self.multi_asset + other.multi_asset)

    def __iadd__(self, other: Union[Value, int]) -> Value:
        new_item = self + other
        self.coin = new_item.coin
        self.multi_asset = new_item.multi_asset
        return self

    def __sub__(self, other: Union[Value, int]) -> Value:
        other = _as_value(other)
        return Value(self.coin - other.coin, self.multi_asset - other.multi_asset)

    def __eq__(self, other):
        if not isinstance(other, (Value, int)):
            return False
        other = _as_value(other)
        return self.coin == other.coin and self.multi_asset == other.multi_asset

    def __ge__(self, other: Union[Value, int]) -> bool:
        return (self - _as_value(other)).is_non_negative()

    def __le__(self, other: Union[Value, int]) -> bool:
        return (_as_value(other) - self).is_non_negative()

    def __gt__(self, other: Union[Value, int]) -> bool:
        return self >= other and self != other

    def __lt__(self, other: Union[Value, int]) -> bool:
        return self <= other and self != other

    def is_zero(self) -> bool:
        """Whether lovelace and every native asset quantity are zero."""
        return self.coin == 0 and self.is_ada_only()

    def is_non_negative(self) -> bool:
        """Whether lovelace and every native asset quantity are zero or positive."""
        return self.coin >= 0 and self.multi_asset.count(lambda p, n, v: v < 0) == 0

    def is_ada_only(self) -> bool:
        """Whether the value carries no native asset with a non-zero quantity."""
        return self.multi_asset.count(lambda p, n, v: v != 0) == 0

    def filter_non_ada(self) -> Value:
        """Drop the lovelace component, keeping only native assets."""
        return Value(0, deepcopy(self.multi_asset))

    def flatten(self) -> FlattenedValue:
        return FlattenedValue(self)

    @classmethod
    @limit_primitive_type(int, list, tuple)
    def from_primitive(cls: Type[Value], value: Union[int, list, tuple]) -> Value:
        if isinstance(value, int):
            return cls(value)
        return super().from_primitive(value)

    def to_shallow_primitive(self):
        # empty policies and zero quantities don't count as native assets
        if self.is_ada_only():
            return self.coin
        else:
            return super().to_shallow_primitive()


def _as_value(value: Union[Value, int]) -> Value:
    return Value(value) if isinstance(value, int) else value


@dataclass(repr=False)
class TransactionOutput(ArraySerializable):
    address: Address

    amount: Value

    datum_hash: Optional[DatumHash] = field(default=None, metadata={"optional": True})

    def __post_init__(self):
        if isinstance(self.address, (str, bytes)):
            self.address = Address.from_primitive(self.address)
        if isinstance(self.amount, int):
            self.amount = Value(self.amount)

    def validate(self):
        if self.amount.coin < 0 or self.amount.multi_asset.count(lambda p, n, v: v < 0):
            raise InvalidDataException(
                f"Transaction output cannot have negative amount of ADA or "
                f"native asset: \n {self.amount}"
            )

    @property
    def lovelace(self) -> int:
        return self.amount.coin


@dataclass(repr=False)
class UTxO(ArraySerializable):
    input: TransactionInput

    output: TransactionOutput

    def __hash__(self):
        return hash(self.input)


class UTxOSet(DictSerializable):
    """A point-in-time snapshot of unspent outputs, keyed by the input that references them.

    Iteration always follows ascending :class:`TransactionInput` order, whatever order entries were added in, so
    every selection made over a snapshot is reproducible.
    """

    KEY_TYPE = TransactionInput

    VALUE_TYPE = TransactionOutput

    @classmethod
    def from_utxos(cls, utxos: Iterable[UTxO]) -> UTxOSet:
        return cls({u.input: u.output for u in utxos})

    def __iter__(self) -> Iterator[TransactionInput]:
        return iter(sorted(self.data))

    def keys(self) -> List[TransactionInput]:
        return list(self)

    def values(self) -> List[TransactionOutput]:
        return [self.data[k] for k in self]

    def items(self) -> List[Tuple[TransactionInput, TransactionOutput]]:
        return [(k, self.data[k]) for k in self]

    def utxos(self) -> List[UTxO]:
        return [UTxO(k, v) for k, v in self.items()]

    def resolve(self, inputs: Iterable[TransactionInput]) -> List[TransactionOutput]:
        """Look up the outputs referenced by ``inputs``. References missing from the snapshot are skipped."""
        return [self.data[i] for i in inputs if i in self.data]

    def total(self, inputs: Optional[Iterable[TransactionInput]] = None) -> Value:
        """Sum the values of the referenced outputs, or of the whole snapshot when no inputs are given."""
        outputs = self.values() if inputs is None else self.resolve(inputs)
        return sum_values(o.amount for o in outputs)

    def __repr__(self):
        return pformat(dict(self.items()))

    def to_shallow_primitive(self) -> list:
        return [[k, v] for k, v in self.items()]

    @classmethod
    @limit_primitive_type(list, tuple)
    def from_primitive(cls: Type[UTxOSet], value: Union[list, tuple]) -> UTxOSet:
        return cls.from_utxos(UTxO.from_primitive(pair) for pair in value)


@dataclass(repr=False)
class TransactionBody(MapSerializable):
    """The part of a transaction that balancing reads and rewrites.

    Balancing never edits a body in place; every step returns a new body.
    """

    inputs: List[TransactionInput] = field(default_factory=list, metadata={"key": 0})

    outputs: List[TransactionOutput] = field(
        default_factory=list, metadata={"key": 1}
    )

    fee: int = field(default=0, metadata={"key": 2})

    ttl: Optional[int] = field(default=None, metadata={"key": 3, "optional": True})

    validity_start: Optional[int] = field(
        default=None, metadata={"key": 8, "optional": True}
    )

    mint: Optional[MultiAsset] = field(
        default=None, metadata={"key": 9, "optional": True}
    )

    collateral: Optional[List[TransactionInput]] = field(
        default=None, metadata={"key": 13, "optional": True}
    )

    required_signers: Optional[List[VerificationKeyHash]] = field(
        default=None, metadata={"key": 14, "optional": True}
    )

    network_id: Optional[Network] = field(
        default=None, metadata={"key": 15, "optional": True}
    )

    reference_inputs: Optional[List[TransactionInput]] = field(
        default=None, metadata={"key": 18, "optional": True}
    )

    def validate(self):
        if self.fee < 0:
            raise InvalidDataException(f"Fee cannot be negative: {self.fee}")
        for output in self.outputs:
            output.validate()

    @property
    def mint_value(self) -> Value:
        """Minted (positive) and burned (negative) assets as a :class:`Value` without lovelace."""
        return Value(0, deepcopy(self.mint)) if self.mint else Value()

    @property
    def output_value(self) -> Value:
        return sum_values(o.amount for o in self.outputs)


def sum_values(values: Iterable[Value]) -> Value:
    total = Value()
    for v in values:
        total += v
    return total

