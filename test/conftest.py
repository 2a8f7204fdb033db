import pytest

from txbalancer import (
    Address,
    Network,
    PaymentSigningKey,
    StakeSigningKey,
    Wallet,
)
from test.txbalancer.util import TEST_ADDR, FixedChainContext


@pytest.fixture
def chain_context():
    return FixedChainContext()


@pytest.fixture
def address() -> Address:
    return TEST_ADDR


@pytest.fixture
def payment_signing_key() -> PaymentSigningKey:
    return PaymentSigningKey(bytes.fromhex("5" * 64))


@pytest.fixture
def stake_signing_key() -> StakeSigningKey:
    return StakeSigningKey(bytes.fromhex("6" * 64))


@pytest.fixture
def wallet(chain_context, address) -> Wallet:
    test_wallet = Wallet(
        name="payment",
        address=address,
        context=chain_context,
        network=Network.TESTNET,
    )
    test_wallet.sync()
    return test_wallet
