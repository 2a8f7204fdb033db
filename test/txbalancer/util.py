from typing import List

from txbalancer.address import Address
from txbalancer.backend.base import ChainContext, ProtocolParameters
from txbalancer.hash import (
    SCRIPT_HASH_SIZE,
    TRANSACTION_HASH_SIZE,
    VERIFICATION_KEY_HASH_SIZE,
    ScriptHash,
    TransactionId,
    VerificationKeyHash,
)
from txbalancer.network import Network
from txbalancer.transaction import (
    Asset,
    AssetName,
    MultiAsset,
    TransactionInput,
    TransactionOutput,
    UTxO,
    Value,
)

TEST_ADDR = Address(
    VerificationKeyHash(b"1" * VERIFICATION_KEY_HASH_SIZE), network=Network.TESTNET
)

# same payment credential as TEST_ADDR, with a staking part
TEST_ADDR_WITH_STAKE = Address(
    VerificationKeyHash(b"1" * VERIFICATION_KEY_HASH_SIZE),
    VerificationKeyHash(b"s" * VERIFICATION_KEY_HASH_SIZE),
    network=Network.TESTNET,
)

OTHER_ADDR = Address(
    VerificationKeyHash(b"2" * VERIFICATION_KEY_HASH_SIZE), network=Network.TESTNET
)

STAKE_ONLY_ADDR = Address(
    None, VerificationKeyHash(b"3" * VERIFICATION_KEY_HASH_SIZE), Network.TESTNET
)

POLICY_ID = ScriptHash(b"p" * SCRIPT_HASH_SIZE)

OTHER_POLICY_ID = ScriptHash(b"q" * SCRIPT_HASH_SIZE)


def tx_in(tag: int, index: int = 0) -> TransactionInput:
    return TransactionInput(TransactionId(bytes([tag]) * TRANSACTION_HASH_SIZE), index)


def tokens(coin: int = 0, policy_id: ScriptHash = POLICY_ID, **quantities) -> Value:
    """Build a value holding ``coin`` lovelace and the given asset quantities under one policy."""
    asset = Asset({AssetName(name.encode()): q for name, q in quantities.items()})
    return Value(coin, MultiAsset({policy_id: asset}))


def utxo(tag: int, amount, address: Address = TEST_ADDR, index: int = 0) -> UTxO:
    return UTxO(tx_in(tag, index), TransactionOutput(address, amount))


class FixedChainContext(ChainContext):

    _protocol_param = ProtocolParameters(
        min_fee_constant=155381,
        min_fee_coefficient=44,
        max_tx_size=16384,
        collateral_percent=150,
        max_collateral_inputs=3,
        coins_per_utxo_byte=4310,
    )

    @property
    def protocol_param(self) -> ProtocolParameters:
        """Get current protocol parameters"""
        return self._protocol_param

    # Create setter function to allow parameter modifications
    # for testing purposes
    @protocol_param.setter
    def protocol_param(self, protocol_param: ProtocolParameters):
        self._protocol_param = protocol_param

    @property
    def network(self) -> Network:
        """Get current network"""
        return Network.TESTNET

    @property
    def last_block_slot(self) -> int:
        """Slot number of last block"""
        return 2000

    def _utxos(self, address: Address) -> List[UTxO]:
        tx_in1 = TransactionInput.from_primitive([b"1" * 32, 0])
        tx_in2 = TransactionInput.from_primitive([b"2" * 32, 1])
        tx_out1 = TransactionOutput.from_primitive([bytes(address), 5000000])
        tx_out2 = TransactionOutput.from_primitive(
            [bytes(address), [6000000, {b"1" * 28: {b"Token1": 1, b"Token2": 2}}]]
        )
        return [UTxO(tx_in1, tx_out1), UTxO(tx_in2, tx_out2)]
