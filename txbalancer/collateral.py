"""Collateral selection for wallets and collateral injection into transaction bodies."""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from txbalancer.exception import (
    BalancingException,
    NoCollateralAvailableException,
    UnconvertibleOutputException,
)
from txbalancer.logging import logger
from txbalancer.result import Err, Ok, Result
from txbalancer.transaction import (
    TransactionBody,
    TransactionInput,
    TransactionOutput,
    UTxO,
    UTxOSet,
)

__all__ = [
    "MIN_COLLATERAL_LOVELACE",
    "select_collateral",
    "add_tx_collaterals",
    "to_transaction_input",
]

MIN_COLLATERAL_LOVELACE = 5_000_000
"""Smallest ada-only UTxO a wallet reserves as collateral."""


def select_collateral(
    utxos: UTxOSet, min_lovelace: int = MIN_COLLATERAL_LOVELACE
) -> Optional[UTxO]:
    """Pick the UTxO a wallet should reserve as collateral.

    Only ada-only entries holding at least ``min_lovelace`` qualify. Among them the smallest one is chosen, which
    leaves larger UTxOs free for spending. When several entries share the smallest amount, the one that comes last
    in the snapshot's input order wins.

    Args:
        utxos (UTxOSet): Snapshot of the wallet's UTxOs.
        min_lovelace (int): Minimum amount of lovelace a collateral UTxO must hold.

    Returns:
        Optional[UTxO]: The selected UTxO, or None when no entry qualifies. Callers that cannot build a
        transaction without collateral have to turn None into a failure themselves.
    """
    selected: Optional[UTxO] = None
    for tx_in, tx_out in utxos.items():
        if not tx_out.amount.is_ada_only() or tx_out.lovelace < min_lovelace:
            continue
        if selected is None or tx_out.lovelace <= selected.output.lovelace:
            selected = UTxO(tx_in, tx_out)

    if selected is None:
        logger.debug(f"No ada-only UTxO holds at least {min_lovelace} lovelace.")
    return selected


def to_transaction_input(
    tx_in: TransactionInput, tx_out: TransactionOutput
) -> Result[TransactionInput, UnconvertibleOutputException]:
    """Turn a snapshot entry into an input a transaction can spend.

    An output sitting at an address without a payment credential, i.e. a stake-only address, cannot be spent.
    """
    if tx_out.address.payment_part is None:
        return Err(
            UnconvertibleOutputException(
                f"Output referenced by {tx_in} has no payment credential: {tx_out.address}"
            )
        )
    return Ok(tx_in)


def add_tx_collaterals(
    utxos: UTxOSet, tx_body: TransactionBody
) -> Result[TransactionBody, BalancingException]:
    """Attach a single ada-only input of ``utxos`` to ``tx_body`` as its collateral.

    The first ada-only entry in the snapshot's input order is used, whatever its amount. An existing collateral
    field is replaced.

    Returns:
        Result[TransactionBody, BalancingException]: The new body, :class:`NoCollateralAvailableException` when the
        snapshot has no ada-only entry, or :class:`UnconvertibleOutputException` when an ada-only entry cannot be
        spent.
    """
    candidates: List[TransactionInput] = []
    for tx_in, tx_out in utxos.items():
        if not tx_out.amount.is_ada_only():
            continue
        converted = to_transaction_input(tx_in, tx_out)
        if isinstance(converted, Err):
            logger.warning(f"Collateral candidate rejected: {converted.error}")
            return converted
        candidates.append(converted.value)

    if not candidates:
        logger.warning("No ada-only UTxO available for collateral.")
        return Err(
            NoCollateralAvailableException(
                f"No ada-only UTxO among {len(utxos)} available UTxOs."
            )
        )

    collateral = candidates[0]
    logger.debug(f"Collateral set to {collateral}")
    return Ok(replace(tx_body, collateral=[collateral]))
