import pytest

from txbalancer.coinselection import GreedySelector, InputSelector, LargestFirstSelector
from txbalancer.exception import (
    InsufficientInputValueException,
    UnconvertibleOutputException,
)
from txbalancer.result import Err, Ok
from txbalancer.transaction import UTxOSet, Value
from test.txbalancer.util import STAKE_ONLY_ADDR, tokens, tx_in, utxo

# 3, 4 and 5 ada, in input order
UTXOS = UTxOSet.from_utxos([utxo(3, 5_000_000), utxo(1, 3_000_000), utxo(2, 4_000_000)])


def test_selector_interface():
    with pytest.raises(NotImplementedError):
        InputSelector().select(UTXOS, [], Value(1))


class TestGreedy:

    selector = GreedySelector()

    def test_ada_only(self):
        assert self.selector.select(UTXOS, [], Value(6_000_000)) == Ok(
            [tx_in(1), tx_in(2)]
        )

    def test_existing_inputs_suffice(self):
        assert self.selector.select(UTXOS, [tx_in(3)], Value(5_000_000)) == Ok([])

    def test_skips_existing_inputs(self):
        assert self.selector.select(UTXOS, [tx_in(1)], Value(6_000_000)) == Ok(
            [tx_in(2)]
        )

    def test_existing_inputs_missing_from_snapshot(self):
        assert self.selector.select(UTXOS, [tx_in(9)], Value(1)) == Ok([tx_in(1)])

    def test_at_least_one_input(self):
        assert self.selector.select(UTXOS, [], Value()) == Ok([tx_in(1)])

    def test_empty_snapshot(self):
        result = self.selector.select(UTxOSet(), [], Value())
        assert isinstance(result, Err)
        assert isinstance(result.error, InsufficientInputValueException)

    def test_native_assets(self):
        utxos = UTxOSet.from_utxos(
            [
                utxo(1, 5_000_000),
                utxo(2, tokens(2_000_000, x=1)),
                utxo(3, tokens(2_000_000, x=1)),
                utxo(4, tokens(2_000_000, x=1)),
            ]
        )
        assert self.selector.select(utxos, [], tokens(1_000_000, x=2)) == Ok(
            [tx_in(1), tx_in(2), tx_in(3)]
        )

    def test_insufficient(self):
        result = self.selector.select(UTXOS, [tx_in(1)], tokens(20_000_000, x=1))
        assert isinstance(result, Err)
        assert result.error.needed == tokens(20_000_000, x=1)
        assert result.error.got == Value(12_000_000)
        with pytest.raises(InsufficientInputValueException):
            result.unwrap()

    def test_unconvertible(self):
        utxos = UTxOSet.from_utxos(
            [utxo(1, 1_000_000, address=STAKE_ONLY_ADDR), utxo(2, 9_000_000)]
        )
        result = self.selector.select(utxos, [], Value(5_000_000))
        assert isinstance(result, Err)
        assert isinstance(result.error, UnconvertibleOutputException)

    def test_unconvertible_not_visited(self):
        utxos = UTxOSet.from_utxos(
            [utxo(1, 9_000_000), utxo(2, 1_000_000, address=STAKE_ONLY_ADDR)]
        )
        assert self.selector.select(utxos, [], Value(5_000_000)) == Ok([tx_in(1)])


class TestLargestFirst:

    selector = LargestFirstSelector()

    def test_ada_only(self):
        assert self.selector.select(UTXOS, [], Value(6_000_000)) == Ok(
            [tx_in(3), tx_in(2)]
        )

    def test_ties_keep_input_order(self):
        utxos = UTxOSet.from_utxos([utxo(2, 5_000_000), utxo(1, 5_000_000)])
        assert self.selector.select(utxos, [], Value(1)) == Ok([tx_in(1)])

    def test_insufficient(self):
        result = self.selector.select(UTXOS, [], Value(13_000_000))
        assert isinstance(result, Err)
        assert result.error.got == Value(12_000_000)
