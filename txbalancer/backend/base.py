"""Defines the interface through which balancing reads chain state from a query layer."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Union

from txbalancer.address import Address
from txbalancer.network import Network
from txbalancer.transaction import UTxO, UTxOSet
from txbalancer.types import typechecked

__all__ = ["ProtocolParameters", "ChainContext"]


@dataclass(frozen=True)
class ProtocolParameters:
    """Protocol parameters that matter to balancing"""

    min_fee_constant: int

    min_fee_coefficient: int

    max_tx_size: int

    collateral_percent: int

    max_collateral_inputs: int

    coins_per_utxo_byte: int


@typechecked
class ChainContext:
    """Interfaces through which the library reads the blockchain.

    Concrete contexts talk to a node or an indexer. Each call to :meth:`utxo_set` produces a new snapshot, and
    balancing treats it as frozen for one attempt.
    """

    @property
    def protocol_param(self) -> ProtocolParameters:
        """Get current protocol parameters"""
        raise NotImplementedError()

    @property
    def network(self) -> Network:
        """Get current network"""
        raise NotImplementedError()

    @property
    def last_block_slot(self) -> int:
        """Slot number of last block"""
        raise NotImplementedError()

    def utxos(self, address: Union[str, Address]) -> List[UTxO]:
        """Get all UTxOs associated with an address.

        Args:
            address (Union[str, Address]): An address, or its hex string.

        Returns:
            List[UTxO]: A list of UTxOs.
        """
        if isinstance(address, str):
            address = Address.from_primitive(address)
        return self._utxos(address)

    def _utxos(self, address: Address) -> List[UTxO]:
        raise NotImplementedError()

    def utxo_set(self, address: Union[str, Address]) -> UTxOSet:
        """Snapshot of all UTxOs associated with an address."""
        return UTxOSet.from_utxos(self.utxos(address))

    def estimate_fee(self, length: Optional[int] = None) -> int:
        """Linear fee of a transaction of ``length`` bytes.

        Args:
            length (Optional[int]): Size of the serialized transaction. Defaults to the maximum transaction size,
                which gives an upper bound on the fee.

        Returns:
            int: Fee in lovelace.
        """
        if length is None:
            length = self.protocol_param.max_tx_size
        return int(
            math.ceil(length * self.protocol_param.min_fee_coefficient)
            + math.ceil(self.protocol_param.min_fee_constant)
        )
