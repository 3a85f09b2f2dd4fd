"""Polling portfolio monitor.

Fetches the portfolio once on start and then every ``interval`` seconds,
rebuilds the aggregate snapshot, and publishes it only when it differs from
the previous one.

State machine:

    IDLE --refresh--> FETCHING --ok--------> READY
                                --missing---> NOT_FOUND
                                --error-----> FAILED   (last snapshot kept)

Refreshes are serialised: each one holds a lock for the whole fetch, and a
result is applied only if its fetch started after the last applied one.
After ``stop()`` any fetch still in flight completes but its result is
discarded, also when the monitor has been started again in the meantime.
"""
import asyncio
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional

import structlog

from barista_dlp.core.config import RiskConfig, monitor_config
from barista_dlp.core.exceptions import LedgerError, PortfolioNotFound
from barista_dlp.core.models import PortfolioSnapshot
from barista_dlp.ledger.client import LedgerClient
from barista_dlp.portfolio.snapshot import build_snapshot

logger = structlog.get_logger(__name__)

SnapshotListener = Callable[[Optional[PortfolioSnapshot]], None]


class MonitorState(str, Enum):
    """Lifecycle state of a PortfolioMonitor."""
    IDLE = "idle"
    FETCHING = "fetching"
    READY = "ready"
    FAILED = "failed"
    NOT_FOUND = "not_found"


class PortfolioMonitor:
    """
    Keeps a deduplicated PortfolioSnapshot for one identity up to date.

    Responsibilities:
    - Polls the ledger client on a fixed interval
    - Builds snapshots from raw portfolio state
    - Replaces the current snapshot only when it changed
    - Retains the last good snapshot across transient failures
    """

    def __init__(
        self,
        client: LedgerClient,
        identity: str,
        interval: Optional[float] = None,
        risk_config: Optional[RiskConfig] = None,
    ):
        self.client = client
        self.identity = identity
        self.interval = interval if interval is not None else monitor_config.refresh_interval_seconds
        if self.interval <= 0:
            raise ValueError("interval must be positive")
        self.risk_config = risk_config

        # State
        self.state = MonitorState.IDLE
        self.snapshot: Optional[PortfolioSnapshot] = None
        self.error: Optional[Exception] = None
        self.last_refreshed_at: Optional[datetime] = None
        self.updates_published = 0

        # Control
        self._lock = asyncio.Lock()
        self._next_ticket = 0
        self._applied_ticket = 0
        self._teardown_ticket = 0
        self._closed = False
        self._poll_task: Optional[asyncio.Task] = None
        self._listeners: List[SnapshotListener] = []

        self.logger = logger.bind(identity=identity)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    @property
    def is_loading(self) -> bool:
        return self.state == MonitorState.FETCHING

    async def start(self):
        """Refresh once, then keep refreshing every ``interval`` seconds."""
        if self.is_running:
            return
        self.logger.info("portfolio_monitor.starting", interval=self.interval)
        self._closed = False
        await self.refresh()
        self._poll_task = asyncio.create_task(self._poll_loop())
        self.logger.info("portfolio_monitor.started", state=self.state.value)

    async def stop(self):
        """Cancel the polling timer. In-flight fetches are left to finish and ignored."""
        self.logger.info("portfolio_monitor.stopping")
        self._closed = True
        # Fetches started before this point never apply, even after a restart
        self._teardown_ticket = self._next_ticket

        if self._poll_task:
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
            self._poll_task = None

        self.logger.info("portfolio_monitor.stopped", state=self.state.value)

    async def _poll_loop(self):
        while not self._closed:
            await asyncio.sleep(self.interval)
            # Shielded so that cancelling the timer does not cancel the fetch
            await asyncio.shield(self.refresh())

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def subscribe(self, listener: SnapshotListener) -> None:
        """Call ``listener`` with each new snapshot (or None once not found)."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: SnapshotListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _publish(self, snapshot: Optional[PortfolioSnapshot]) -> None:
        self.updates_published += 1
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                self.logger.error("portfolio_monitor.listener_error", error=str(e))

    # -------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------

    async def refresh(self) -> Optional[PortfolioSnapshot]:
        """
        Fetch the portfolio once and update state.

        Ledger failures are recorded on the monitor, never raised.

        Returns:
            The current snapshot after this refresh (None if none exists)
        """
        async with self._lock:
            if self._closed:
                return self.snapshot

            self._next_ticket += 1
            ticket = self._next_ticket
            previous_state = self.state
            self.state = MonitorState.FETCHING

            try:
                portfolio = await self.client.get_portfolio(self.identity)
                if portfolio is None:
                    raise PortfolioNotFound(self.identity)
                snapshot = build_snapshot(portfolio, self.risk_config)
            except PortfolioNotFound as e:
                if self._accept(ticket):
                    self._apply_not_found(e)
            except LedgerError as e:
                if self._accept(ticket):
                    self._apply_failure(e)
            except Exception as e:
                if self._accept(ticket):
                    self.logger.error(
                        "portfolio_monitor.unexpected_error",
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    self._apply_failure(e)
            else:
                if self._accept(ticket):
                    self._apply_snapshot(snapshot)

            if self.state == MonitorState.FETCHING:
                # Result was discarded
                self.state = previous_state
            return self.snapshot

    def _accept(self, ticket: int) -> bool:
        """Whether a result from ``ticket`` may still be applied."""
        if self._closed or ticket <= self._teardown_ticket:
            self.logger.debug("portfolio_monitor.result_discarded", ticket=ticket, reason="stopped")
            return False
        if ticket <= self._applied_ticket:
            self.logger.debug("portfolio_monitor.result_discarded", ticket=ticket, reason="stale")
            return False
        self._applied_ticket = ticket
        self.last_refreshed_at = datetime.now(timezone.utc)
        return True

    def _apply_snapshot(self, snapshot: PortfolioSnapshot) -> None:
        self.state = MonitorState.READY
        self.error = None

        if snapshot == self.snapshot:
            self.logger.debug("portfolio_monitor.unchanged")
            return

        self.snapshot = snapshot
        self.logger.info(
            "portfolio_monitor.snapshot_updated",
            equity=str(snapshot.equity),
            free_collateral=str(snapshot.free_collateral),
            margin_ratio=str(snapshot.margin_ratio),
            positions=snapshot.position_count,
        )
        self._publish(snapshot)

    def _apply_not_found(self, error: PortfolioNotFound) -> None:
        self.state = MonitorState.NOT_FOUND
        self.error = error
        self.logger.info("portfolio_monitor.portfolio_not_found")

        if self.snapshot is not None:
            self.snapshot = None
            self._publish(None)

    def _apply_failure(self, error: Exception) -> None:
        self.state = MonitorState.FAILED
        self.error = error
        self.logger.warning(
            "portfolio_monitor.refresh_failed",
            error=str(error),
            has_snapshot=self.snapshot is not None,
        )
