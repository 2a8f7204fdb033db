from unittest.mock import patch

import pytest

from txbalancer.address import Address
from txbalancer.exception import (
    InvalidArgumentException,
    NoCollateralAvailableException,
)
from txbalancer.key import PaymentSigningKey
from txbalancer.network import Network
from txbalancer.result import Err
from txbalancer.transaction import (
    TransactionBody,
    TransactionInput,
    TransactionOutput,
    UTxOSet,
)
from txbalancer.wallet import Wallet
from test.txbalancer.util import OTHER_ADDR, TEST_ADDR, FixedChainContext

ADA_ONLY_IN = TransactionInput.from_primitive([b"1" * 32, 0])
TOKEN_IN = TransactionInput.from_primitive([b"2" * 32, 1])


def test_sync(wallet):
    assert len(wallet.utxos) == 2
    assert wallet.lovelace == 11000000
    assert wallet.utxos.keys() == [ADA_ONLY_IN, TOKEN_IN]


def test_sync_query_error(chain_context, address):
    w = Wallet(
        name="payment", address=address, context=chain_context, network=Network.TESTNET
    )
    with patch.object(
        FixedChainContext, "_utxos", side_effect=Exception("address not found")
    ):
        assert w.sync() == UTxOSet()
    assert w.lovelace == 0
    assert w.select_collateral() is None


def test_sync_without_context(address):
    w = Wallet(name="payment", address=address, network=Network.TESTNET)
    with pytest.raises(InvalidArgumentException):
        w.sync()


def test_sync_with_explicit_context(chain_context, address):
    w = Wallet(name="payment", address=address, network=Network.TESTNET)
    w.sync(chain_context)
    assert len(w.utxos) == 2


def test_address_from_hex(address):
    w = Wallet(name="payment", address=str(address), network=Network.TESTNET)
    assert w.address == address


def test_network_mismatch(address):
    with pytest.raises(InvalidArgumentException):
        Wallet(name="payment", address=address)


def test_address_from_keys(payment_signing_key, stake_signing_key):
    w = Wallet(
        name="payment",
        payment_signing_key=payment_signing_key,
        stake_signing_key=stake_signing_key,
        network=Network.TESTNET,
    )
    assert w.address == Address.from_verification_keys(
        payment_signing_key.to_verification_key(),
        stake_signing_key.to_verification_key(),
        Network.TESTNET,
    )
    assert w.address.network == Network.TESTNET


def test_generated_key():
    w = Wallet(name="fresh")
    assert isinstance(w.payment_signing_key, PaymentSigningKey)
    assert w.address.payment_part == w.payment_signing_key.to_verification_key().hash()
    assert w.address.staking_part is None


def test_select_collateral(wallet):
    collateral = wallet.select_collateral()
    assert collateral.input == ADA_ONLY_IN
    assert wallet.require_collateral().unwrap() == collateral


def test_require_collateral_missing(wallet):
    assert wallet.select_collateral(6000000) is None
    result = wallet.require_collateral(6000000)
    assert isinstance(result, Err)
    assert isinstance(result.error, NoCollateralAvailableException)


def test_balance(wallet):
    tx_body = TransactionBody(
        inputs=[TOKEN_IN], outputs=[TransactionOutput(OTHER_ADDR, 3000000)]
    )

    balanced = wallet.balance(tx_body).unwrap()

    token_change = wallet.utxos[TOKEN_IN].amount.filter_non_ada()
    assert balanced.collateral == [ADA_ONLY_IN]
    assert balanced.outputs == [
        TransactionOutput(TEST_ADDR, token_change),
        TransactionOutput(OTHER_ADDR, 3000000),
    ]
    assert balanced.inputs == [TOKEN_IN]


def test_balance_default_fee_adds_inputs(wallet):
    tx_body = TransactionBody(
        inputs=[TOKEN_IN], outputs=[TransactionOutput(OTHER_ADDR, 5500000)]
    )

    # 5.5 ada plus the default fee is more than the token UTxO holds
    balanced = wallet.balance(tx_body).unwrap()
    assert balanced.inputs == [ADA_ONLY_IN, TOKEN_IN]

    # a small explicit fee is covered by the token UTxO alone
    balanced = wallet.balance(tx_body, fee=200000).unwrap()
    assert balanced.inputs == [TOKEN_IN]


def test_balance_with_hex_address(chain_context):
    w = Wallet(
        name="payment",
        address=str(TEST_ADDR),
        context=chain_context,
        network=Network.TESTNET,
    )
    w.sync()
    tx_body = TransactionBody(
        inputs=[TOKEN_IN], outputs=[TransactionOutput(OTHER_ADDR, 3000000)]
    )

    balanced = w.balance(tx_body, fee=200000).unwrap()

    assert w.address == TEST_ADDR
    assert balanced.outputs[0].address == TEST_ADDR


def test_balance_without_context(address):
    w = Wallet(name="payment", address=address, network=Network.TESTNET)
    with pytest.raises(InvalidArgumentException):
        w.balance(TransactionBody())
