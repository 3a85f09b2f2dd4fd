"""Ledger-client boundary.

The remote accounting program, its account layout, RPC transport and wallet
handling live outside this package. Implementations of ``LedgerClient``
adapt them to the raw ``Portfolio`` record consumed by the risk and snapshot
code.
"""
from abc import ABC, abstractmethod
from typing import Dict, Optional

import structlog

from barista_dlp.core.exceptions import PortfolioNotFound
from barista_dlp.core.models import Portfolio

logger = structlog.get_logger(__name__)


class LedgerClient(ABC):
    """Abstract read-only view of the remote ledger."""

    @abstractmethod
    async def get_portfolio(self, identity: str) -> Optional[Portfolio]:
        """
        Fetch the current portfolio for ``identity``.

        Args:
            identity: Owner identity (e.g. a base58 public key)

        Returns:
            The raw Portfolio. Implementations may return None instead of
            raising PortfolioNotFound when the account does not exist.

        Raises:
            PortfolioNotFound: If the ledger has no portfolio for the identity
            LedgerNetworkError: On transport failures
        """
        pass


class InMemoryLedgerClient(LedgerClient):
    """Ledger client backed by a dictionary, for paper mode and tests."""

    def __init__(self, portfolios: Optional[Dict[str, Portfolio]] = None):
        self._portfolios: Dict[str, Portfolio] = dict(portfolios or {})

    def set_portfolio(self, identity: str, portfolio: Portfolio) -> None:
        self._portfolios[identity] = portfolio

    def remove_portfolio(self, identity: str) -> None:
        self._portfolios.pop(identity, None)

    async def get_portfolio(self, identity: str) -> Portfolio:
        portfolio = self._portfolios.get(identity)
        if portfolio is None:
            logger.debug("ledger.portfolio_missing", identity=identity)
            raise PortfolioNotFound(identity)
        return portfolio
