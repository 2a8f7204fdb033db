from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union, cast

from txbalancer.address import Address
from txbalancer.backend.base import ChainContext
from txbalancer.balance import balance_tx
from txbalancer.coinselection import InputSelector
from txbalancer.collateral import MIN_COLLATERAL_LOVELACE, select_collateral
from txbalancer.exception import (
    BalancingException,
    InvalidArgumentException,
    NoCollateralAvailableException,
)
from txbalancer.key import PaymentSigningKey, StakeSigningKey
from txbalancer.logging import log_state, logger
from txbalancer.network import Network
from txbalancer.result import Err, Ok, Result
from txbalancer.transaction import TransactionBody, UTxO, UTxOSet, Value

__all__ = ["Wallet"]


@dataclass
class Wallet:
    """A wallet that keeps a UTxO snapshot of its own address and balances transactions against it.

    Attributes:
        name (str): The name of the wallet, used in logs.
        address (Optional[Union[Address, str]]): Address of the wallet. When omitted it is derived from the payment
            key and the optional stake key. A payment key is generated when none is given either.
        context (Optional[ChainContext]): Query layer used by :meth:`sync`.
        network (Network): Network of the derived address. Must match the network of a given address.
        payment_signing_key (Optional[PaymentSigningKey]): Key that controls the payment credential.
        stake_signing_key (Optional[StakeSigningKey]): Key that controls the staking credential.
    """

    name: str
    address: Optional[Union[Address, str]] = None
    context: Optional[ChainContext] = field(repr=False, default=None)
    network: Network = Network.MAINNET
    payment_signing_key: Optional[PaymentSigningKey] = field(repr=False, default=None)
    stake_signing_key: Optional[StakeSigningKey] = field(repr=False, default=None)

    # populated by sync()
    utxos: UTxOSet = field(repr=False, default_factory=UTxOSet)
    balance_value: Value = field(repr=False, default_factory=Value)

    def __post_init__(self):
        if isinstance(self.address, str):
            self.address = Address.from_primitive(self.address)

        if self.address is None:
            if self.payment_signing_key is None:
                self.payment_signing_key = PaymentSigningKey.generate()
                logger.info(f"New payment key generated for wallet {self.name}.")
            stake_vkey = (
                self.stake_signing_key.to_verification_key()
                if self.stake_signing_key
                else None
            )
            self.address = Address.from_verification_keys(
                self.payment_signing_key.to_verification_key(),
                stake_vkey,
                network=self.network,
            )
        elif self.address.network != self.network:
            raise InvalidArgumentException(
                f"{self.network} does not match the network of the provided address."
            )

        logger.info(self.__repr__())

    @property
    def lovelace(self) -> int:
        return self.balance_value.coin

    def _find_context(self, context: Optional[ChainContext] = None) -> ChainContext:
        """Return ``context`` when given, otherwise the wallet's own context."""
        context = context or self.context
        if context is None:
            raise InvalidArgumentException(
                "Please pass `context` or set Wallet.context."
            )
        return context

    @log_state
    def sync(self, context: Optional[ChainContext] = None) -> UTxOSet:
        """Fetch a fresh snapshot of the wallet's UTxOs.

        Args:
            context (Optional[ChainContext]): The context to use for the query. Defaults to the wallet's context.

        Returns:
            UTxOSet: The new snapshot, also stored in :attr:`utxos`.
        """
        context = self._find_context(context)

        try:
            self.utxos = context.utxo_set(self.address)
        except Exception as e:
            logger.warning(
                f"Error getting UTxOs. Address has likely not transacted yet. Details: {e}"
            )
            self.utxos = UTxOSet()

        self.balance_value = self.utxos.total()
        if self.utxos:
            logger.info(
                f"Wallet {self.name} has {len(self.utxos)} UTxOs containing a total of "
                f"{self.lovelace} lovelace."
            )
        else:
            logger.info(f"Wallet {self.name} has no UTxOs.")
        return self.utxos

    def select_collateral(
        self, min_lovelace: int = MIN_COLLATERAL_LOVELACE
    ) -> Optional[UTxO]:
        """Pick the UTxO this wallet reserves as collateral, or None when no UTxO qualifies."""
        return select_collateral(self.utxos, min_lovelace)

    def require_collateral(
        self, min_lovelace: int = MIN_COLLATERAL_LOVELACE
    ) -> Result[UTxO, NoCollateralAvailableException]:
        """Same as :meth:`select_collateral`, for workflows that cannot go on without collateral."""
        collateral = self.select_collateral(min_lovelace)
        if collateral is None:
            return Err(
                NoCollateralAvailableException(
                    f"Wallet {self.name} has no ada-only UTxO with at least {min_lovelace} lovelace."
                )
            )
        return Ok(collateral)

    def balance(
        self,
        tx_body: TransactionBody,
        fee: Optional[int] = None,
        context: Optional[ChainContext] = None,
        selector: Optional[InputSelector] = None,
    ) -> Result[TransactionBody, BalancingException]:
        """Balance ``tx_body`` against the current snapshot, sending native asset change to this wallet.

        Args:
            tx_body (TransactionBody): Body to balance.
            fee (Optional[int]): Fee in lovelace. Defaults to the upper bound given by the chain context.
            context (Optional[ChainContext]): Context used for the default fee. Defaults to the wallet's context.
            selector (Optional[InputSelector]): Input selection strategy.

        Returns:
            Result[TransactionBody, BalancingException]: The balanced body or the reason balancing failed.
        """
        if fee is None:
            fee = self._find_context(context).estimate_fee()
        return balance_tx(cast(Address, self.address), self.utxos, fee, tx_body, selector)
