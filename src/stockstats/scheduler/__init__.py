"""Scheduler Module - Periodic fetch and dispatch."""

from stockstats.scheduler.dispatcher import (
    DispatcherState,
    OutcomeStatus,
    PeriodicFetchDispatcher,
    TickReport,
)

__all__ = [
    "PeriodicFetchDispatcher",
    "DispatcherState",
    "OutcomeStatus",
    "TickReport",
]
