"""
This module contains strategies that pick additional inputs from a UTxO snapshot until a required value is covered.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from txbalancer.collateral import to_transaction_input
from txbalancer.exception import BalancingException, InsufficientInputValueException
from txbalancer.logging import logger
from txbalancer.result import Err, Ok, Result
from txbalancer.transaction import TransactionInput, TransactionOutput, UTxOSet, Value

__all__ = ["InputSelector", "GreedySelector", "LargestFirstSelector"]


class InputSelector:
    """InputSelector defines an interface through which extra inputs are chosen from a UTxO snapshot, so that
    together with the inputs a transaction already spends they cover a required value.
    """

    def select(
        self,
        utxos: UTxOSet,
        inputs: Sequence[TransactionInput],
        required: Value,
    ) -> Result[List[TransactionInput], BalancingException]:
        """Choose the inputs to add on top of ``inputs``.

        Args:
            utxos (UTxOSet): Snapshot to pick from. Also used to resolve ``inputs``.
            inputs (Sequence[TransactionInput]): Inputs already chosen. They are never dropped.
            required (Value): Value the resolved inputs have to dominate.

        Returns:
            Result[List[TransactionInput], BalancingException]: Newly selected inputs in selection order (empty when
            ``inputs`` already suffice), :class:`InsufficientInputValueException` when the snapshot is exhausted, or
            :class:`UnconvertibleOutputException` when a visited entry cannot be spent.
        """
        raise NotImplementedError()


class GreedySelector(InputSelector):
    """Walk the snapshot in its own order and take every entry not yet spent until the requirement is met.

    No attempt is made to prefer larger or smaller UTxOs.
    """

    def candidates(
        self, utxos: UTxOSet
    ) -> List[Tuple[TransactionInput, TransactionOutput]]:
        return utxos.items()

    def select(
        self,
        utxos: UTxOSet,
        inputs: Sequence[TransactionInput],
        required: Value,
    ) -> Result[List[TransactionInput], BalancingException]:
        present = set(inputs)
        resolved = utxos.resolve(inputs)
        has_inputs = bool(resolved)
        total = Value()
        for o in resolved:
            total += o.amount

        selected: List[TransactionInput] = []
        for tx_in, tx_out in self.candidates(utxos):
            if has_inputs and total >= required:
                break
            if tx_in in present:
                continue
            converted = to_transaction_input(tx_in, tx_out)
            if isinstance(converted, Err):
                return converted
            selected.append(converted.value)
            present.add(tx_in)
            total += tx_out.amount
            has_inputs = True

        if not (has_inputs and total >= required):
            return Err(
                InsufficientInputValueException(
                    required, total, "Not enough inputs to cover the required value"
                )
            )

        logger.debug(
            f"{self.__class__.__name__} added {len(selected)} input(s): {selected}"
        )
        return Ok(selected)


class LargestFirstSelector(GreedySelector):
    """
    Largest first selection as described in
    https://github.com/cardano-foundation/CIPs/tree/master/CIP-0002#largest-first.

    Entries with more lovelace are visited first. Entries with equal lovelace keep the snapshot order.
    """

    def candidates(
        self, utxos: UTxOSet
    ) -> List[Tuple[TransactionInput, TransactionOutput]]:
        return sorted(utxos.items(), key=lambda item: item[1].lovelace, reverse=True)
