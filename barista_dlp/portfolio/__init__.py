"""Portfolio snapshots and the polling monitor."""

from barista_dlp.portfolio.monitor import MonitorState, PortfolioMonitor
from barista_dlp.portfolio.snapshot import build_positions, build_snapshot

__all__ = [
    "MonitorState",
    "PortfolioMonitor",
    "build_positions",
    "build_snapshot",
]
