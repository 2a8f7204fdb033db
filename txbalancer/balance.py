"""Balancing of transaction bodies against a UTxO snapshot.

An external fee tool only accounts for lovelace. The functions here reconcile everything else: native asset
change (:func:`balance_non_ada_outs`) and inputs that cover the fee plus the outputs (:func:`balance_tx_ins`).
:func:`balance_tx` chains them with collateral injection in the order a transaction needs them.

Every function is pure: bodies and snapshots passed in are left untouched, and a new body is returned inside
:class:`~txbalancer.result.Ok`, or a failure inside :class:`~txbalancer.result.Err`.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from txbalancer.address import Address
from txbalancer.coinselection import GreedySelector, InputSelector
from txbalancer.collateral import add_tx_collaterals
from txbalancer.exception import (
    BalancingException,
    InsufficientInputValueException,
    UnconvertibleOutputException,
)
from txbalancer.logging import logger
from txbalancer.result import Err, Ok, Result
from txbalancer.transaction import TransactionBody, TransactionOutput, UTxOSet, Value

__all__ = [
    "non_ada_change",
    "balance_non_ada_outs",
    "required_value",
    "balance_tx_ins",
    "balance_tx",
]


def non_ada_change(utxos: UTxOSet, tx_body: TransactionBody) -> Value:
    """Native assets brought in by the inputs and not consumed by the outputs, net of minting.

    Inputs missing from ``utxos`` contribute nothing. A negative quantity means the outputs need more of that
    asset than the inputs and the mint provide.
    """
    input_value = utxos.total(tx_body.inputs)
    non_minted_output_value = tx_body.output_value - tx_body.mint_value
    return input_value.filter_non_ada() - non_minted_output_value.filter_non_ada()


def balance_non_ada_outs(
    change_address: Address, utxos: UTxOSet, tx_body: TransactionBody
) -> Result[TransactionBody, BalancingException]:
    """Send native asset change to ``change_address`` so that no asset is created or lost.

    The change goes into the first output whose payment credential equals the one of ``change_address``; that
    output keeps its lovelace and its position. When no output matches, a new output carrying only the change is
    put in front of the existing outputs. Further matching outputs are left as they are.

    Args:
        change_address (Address): Address that receives the change. Only its payment credential is compared.
        utxos (UTxOSet): Snapshot used to resolve the inputs of ``tx_body``.
        tx_body (TransactionBody): Body to balance.

    Returns:
        Result[TransactionBody, BalancingException]: ``tx_body`` itself when there is no change, a new body with the
        change added, :class:`InsufficientInputValueException` when the outputs spend native assets the inputs
        don't hold, or :class:`UnconvertibleOutputException` when there is change and ``change_address`` has no
        payment credential.
    """
    change = non_ada_change(utxos, tx_body)

    if not change.is_non_negative():
        needed = (tx_body.output_value - tx_body.mint_value).filter_non_ada()
        got = utxos.total(tx_body.inputs).filter_non_ada()
        logger.warning(f"Token change is negative: {change.flatten().format()}")
        return Err(
            InsufficientInputValueException(
                needed, got, "Not enough inputs to balance tokens"
            )
        )

    if change.is_zero():
        return Ok(tx_body)

    if change_address.payment_part is None:
        logger.warning(f"Change address {change_address} has no payment credential")
        return Err(
            UnconvertibleOutputException(
                f"Cannot send token change to {change_address}, it has no payment credential."
            )
        )

    outputs: List[TransactionOutput] = list(tx_body.outputs)
    for i, output in enumerate(outputs):
        if output.address.payment_part == change_address.payment_part:
            outputs[i] = replace(output, amount=output.amount + change)
            break
    else:
        outputs.insert(0, TransactionOutput(change_address, change))

    logger.debug(f"Token change {change.flatten().format()} sent to {change_address}")
    return Ok(replace(tx_body, outputs=outputs))


def required_value(fee: int, tx_body: TransactionBody) -> Value:
    """Value the inputs of ``tx_body`` must cover: the fee plus the outputs that are not minted."""
    return Value(fee) + tx_body.output_value - tx_body.mint_value


def balance_tx_ins(
    utxos: UTxOSet,
    fee: int,
    tx_body: TransactionBody,
    selector: Optional[InputSelector] = None,
) -> Result[TransactionBody, BalancingException]:
    """Add inputs from ``utxos`` until the inputs cover the fee and the non-minted outputs.

    New inputs are placed in front of the existing ones, none of which is ever removed.

    Args:
        utxos (UTxOSet): Snapshot to pick inputs from.
        fee (int): Fee in lovelace the inputs have to pay for.
        tx_body (TransactionBody): Body whose inputs get extended.
        selector (Optional[InputSelector]): Strategy that picks the inputs. Defaults to :class:`GreedySelector`.

    Returns:
        Result[TransactionBody, BalancingException]: The body with its new inputs, or
        :class:`InsufficientInputValueException` carrying the required value and the value found.
    """
    selector = selector or GreedySelector()
    required = required_value(fee, tx_body)

    selected = selector.select(utxos, tx_body.inputs, required)
    if isinstance(selected, Err):
        logger.warning(f"Input selection failed: {selected.error}")
        return selected

    if not selected.value:
        return Ok(tx_body)
    return Ok(replace(tx_body, inputs=selected.value + list(tx_body.inputs)))


def balance_tx(
    change_address: Address,
    utxos: UTxOSet,
    fee: int,
    tx_body: TransactionBody,
    selector: Optional[InputSelector] = None,
) -> Result[TransactionBody, BalancingException]:
    """Run collateral injection, native asset balancing and input selection, stopping at the first failure.

    Inputs picked during selection may carry native assets of their own, so native asset change is routed once
    more at the end. That pass only adds assets the new inputs bring in, which keeps the inputs sufficient.

    A failure means the snapshot cannot balance this body. Fetch a fresh snapshot and run the whole pipeline again
    rather than resuming from an intermediate body.
    """
    return (
        add_tx_collaterals(utxos, tx_body)
        .and_then(lambda body: balance_non_ada_outs(change_address, utxos, body))
        .and_then(lambda body: balance_tx_ins(utxos, fee, body, selector))
        .and_then(lambda body: balance_non_ada_outs(change_address, utxos, body))
    )
