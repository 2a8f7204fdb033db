import pytest

from txbalancer.address import Address, AddressType
from txbalancer.exception import DeserializeException, InvalidAddressInputException
from txbalancer.hash import ScriptHash, VerificationKeyHash
from txbalancer.key import PaymentSigningKey, StakeSigningKey
from txbalancer.network import Network

PAYMENT_HASH = VerificationKeyHash(b"1" * 28)
STAKE_HASH = VerificationKeyHash(b"2" * 28)
SCRIPT_HASH = ScriptHash(b"3" * 28)


def test_payment_addr():
    addr = Address(PAYMENT_HASH, network=Network.TESTNET)
    assert addr.address_type == AddressType.KEY_NONE
    assert addr.header_byte == b"\x60"
    assert bytes(addr) == b"\x60" + b"1" * 28
    assert addr.staking_part is None


def test_base_addr():
    addr = Address(PAYMENT_HASH, STAKE_HASH)
    assert addr.address_type == AddressType.KEY_KEY
    assert addr.header_byte == b"\x01"
    assert addr.network == Network.MAINNET


def test_script_addr():
    addr = Address(SCRIPT_HASH, STAKE_HASH, Network.TESTNET)
    assert addr.address_type == AddressType.SCRIPT_KEY
    assert Address.from_primitive(bytes(addr)).payment_part == SCRIPT_HASH


def test_stake_only_addr():
    addr = Address(None, STAKE_HASH, Network.TESTNET)
    assert addr.address_type == AddressType.NONE_KEY
    assert addr.payment_part is None


def test_empty_addr():
    with pytest.raises(InvalidAddressInputException):
        Address()


@pytest.mark.parametrize(
    "payment_part,staking_part",
    [
        (PAYMENT_HASH, None),
        (PAYMENT_HASH, STAKE_HASH),
        (SCRIPT_HASH, SCRIPT_HASH),
        (PAYMENT_HASH, SCRIPT_HASH),
        (None, SCRIPT_HASH),
    ],
)
def test_addr_primitive(payment_part, staking_part):
    addr = Address(payment_part, staking_part, Network.TESTNET)
    assert Address.from_primitive(bytes(addr)) == addr
    assert Address.from_primitive(str(addr)) == addr
    assert hash(Address.from_primitive(str(addr))) == hash(addr)


def test_addr_credential_kinds_matter():
    key_addr = Address(VerificationKeyHash(b"3" * 28), network=Network.TESTNET)
    script_addr = Address(SCRIPT_HASH, network=Network.TESTNET)
    assert key_addr != script_addr
    assert key_addr.payment_part != script_addr.payment_part


@pytest.mark.parametrize(
    "value",
    [
        b"",
        "zz",
        b"\x90" + b"1" * 28,
        b"\x62" + b"1" * 28,
        b"\x60" + b"1" * 10,
        b"\x00" + b"1" * 30,
    ],
)
def test_invalid_addr_primitive(value):
    with pytest.raises(DeserializeException):
        Address.from_primitive(value)


def test_addr_from_primitive_type():
    with pytest.raises(DeserializeException):
        Address.from_primitive(1)


def test_addr_from_verification_keys():
    payment_vkey = PaymentSigningKey.generate().to_verification_key()
    stake_vkey = StakeSigningKey.generate().to_verification_key()

    addr = Address.from_verification_keys(payment_vkey, network=Network.TESTNET)
    assert addr == Address(payment_vkey.hash(), network=Network.TESTNET)

    addr = Address.from_verification_keys(payment_vkey, stake_vkey)
    assert addr == Address(payment_vkey.hash(), stake_vkey.hash())


def test_addr_from_verification_keys_wrong_slot():
    payment_vkey = PaymentSigningKey.generate().to_verification_key()
    stake_vkey = StakeSigningKey.generate().to_verification_key()

    with pytest.raises(InvalidAddressInputException):
        Address.from_verification_keys(stake_vkey)

    with pytest.raises(InvalidAddressInputException):
        Address.from_verification_keys(payment_vkey, payment_vkey)
