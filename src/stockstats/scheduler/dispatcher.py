"""Periodic Fetch Dispatcher - Tick-driven quote fetching and reporting.

On every tick:
1. Capture now (UTC) as the period end
2. Fetch [period_start, now] for every tracked symbol concurrently
3. Normalize quotes and compute statistics
4. Report one CSV line per symbol with data

A failed fetch skips that symbol for the tick only.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from stockstats.config_loader import ConfigurationError, TrackerConfig
from stockstats.data.indicators import compute_stats
from stockstats.data.market_data import PeriodRequest, StatsResult
from stockstats.providers.base import FetchError, QuoteProvider
from stockstats.reporting.csv_reporter import CsvReporter

logger = logging.getLogger(__name__)


class DispatcherState(str, Enum):
    """Dispatcher lifecycle state."""

    IDLE = "idle"
    DISPATCHING = "dispatching"
    STOPPED = "stopped"


class OutcomeStatus(str, Enum):
    """What happened to one symbol during one tick."""

    REPORTED = "reported"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class SymbolOutcome:
    """Result of fetching and summarizing one symbol."""

    symbol: str
    status: OutcomeStatus
    quote_count: int = 0
    result: StatsResult | None = None
    error: str | None = None


@dataclass
class TickReport:
    """Summary of one tick."""

    period_end: datetime
    outcomes: list[SymbolOutcome] = field(default_factory=list)

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def reported(self) -> int:
        return self._count(OutcomeStatus.REPORTED)

    @property
    def empty(self) -> int:
        return self._count(OutcomeStatus.EMPTY)

    @property
    def failed(self) -> int:
        return self._count(OutcomeStatus.FAILED)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PeriodicFetchDispatcher:
    """
    Drives the fetch-and-report cycle on a fixed interval.

    Lifecycle:
    1. IDLE between ticks
    2. DISPATCHING while fetches for a tick are in flight
    3. STOPPED once run() returns
    """

    def __init__(
        self,
        config: TrackerConfig,
        provider: QuoteProvider,
        reporter: CsvReporter,
    ):
        if config.period_start is None:
            raise ConfigurationError("Period start is required; pass --from or set tracker.period_start")

        self.config = config
        self.provider = provider
        self.reporter = reporter

        self._state = DispatcherState.IDLE
        self._stop_event = asyncio.Event()
        self._tick_count = 0

    @property
    def state(self) -> DispatcherState:
        return self._state

    @property
    def tick_count(self) -> int:
        return self._tick_count

    def build_requests(self, period_end: datetime) -> list[PeriodRequest]:
        """Create one request per tracked symbol for [period_start, period_end]."""
        return [
            PeriodRequest(
                symbol=symbol,
                start=self.config.period_start,
                end=period_end,
                interval=self.config.quote_interval,
            )
            for symbol in self.config.symbols
        ]

    async def _fetch_symbol(self, request: PeriodRequest) -> SymbolOutcome:
        """Fetch and summarize a single symbol."""
        symbol = request.symbol
        timeout = self.config.fetch_timeout_seconds

        try:
            if timeout is None:
                quotes = await self.provider.fetch_quotes(request)
            else:
                quotes = await asyncio.wait_for(self.provider.fetch_quotes(request), timeout)
        except FetchError as e:
            logger.warning(f"Ignoring API error for symbol '{symbol}': {e.message}")
            return SymbolOutcome(symbol, OutcomeStatus.FAILED, error=e.message)
        except asyncio.TimeoutError:
            logger.warning(f"Fetch for symbol '{symbol}' timed out after {timeout}s")
            return SymbolOutcome(symbol, OutcomeStatus.FAILED, error="timeout")
        except Exception as e:
            logger.error(f"Unexpected error fetching symbol '{symbol}': {e}", exc_info=True)
            return SymbolOutcome(symbol, OutcomeStatus.FAILED, error=str(e) or e.__class__.__name__)

        result = compute_stats(
            symbol,
            quotes,
            window=self.config.sma_window,
            price_field=self.config.price_field,
        )

        if result is None:
            logger.info(f"No quotes found for symbol '{symbol}'")
            return SymbolOutcome(symbol, OutcomeStatus.EMPTY, quote_count=len(quotes))

        if result.sma is None and self.config.require_full_window:
            logger.info(
                f"Only {len(quotes)} quotes for symbol '{symbol}', "
                f"fewer than the {self.config.sma_window}-sample window"
            )
            return SymbolOutcome(symbol, OutcomeStatus.EMPTY, quote_count=len(quotes))

        return SymbolOutcome(
            symbol, OutcomeStatus.REPORTED, quote_count=len(quotes), result=result
        )

    async def tick(self) -> TickReport:
        """
        Run one fetch-and-report cycle for all tracked symbols.

        Lines are written only after every fetch of the tick has settled, in
        configured symbol order. A cancelled tick writes nothing.
        """
        self._state = DispatcherState.DISPATCHING
        period_end = _utcnow()
        report = TickReport(period_end=period_end)

        try:
            requests = self.build_requests(period_end)
            outcomes = await asyncio.gather(*(self._fetch_symbol(r) for r in requests))

            for outcome in outcomes:
                if outcome.result is not None:
                    self.reporter.report(outcome.result)
            report.outcomes.extend(outcomes)
        finally:
            self._state = DispatcherState.IDLE

        self._tick_count += 1
        logger.debug(
            f"Tick {self._tick_count}: {report.reported} reported, "
            f"{report.empty} empty, {report.failed} failed"
        )
        return report

    async def _wait_for_stop(self, timeout: float) -> bool:
        """Sleep until the next tick. Returns True if stop was requested meanwhile."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return True

    async def _run_tick_until_stopped(self) -> bool:
        """Run one tick, cancelling it if stop is requested. Returns False if cancelled."""
        tick_task = asyncio.create_task(self.tick())
        stop_task = asyncio.create_task(self._stop_event.wait())
        try:
            done, _ = await asyncio.wait(
                {tick_task, stop_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            stop_task.cancel()
            if not tick_task.done():
                tick_task.cancel()

        if tick_task in done:
            tick_task.result()
            return True

        logger.info("Stop requested during dispatch, cancelling in-flight fetches")
        with contextlib.suppress(asyncio.CancelledError):
            await tick_task
        return False

    async def run(self, max_ticks: int | None = None) -> int:
        """
        Run ticks on a fixed interval until stopped.

        The first tick fires immediately. Missed ticks are not made up.

        Args:
            max_ticks: Stop after this many completed ticks (None runs forever).

        Returns:
            Number of completed ticks.
        """
        interval = self.config.tick_interval_seconds
        logger.info(
            f"Tracking {', '.join(self.config.symbols)} from "
            f"{self.config.period_start.isoformat()} every {interval}s"
        )

        self.reporter.write_header()
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        completed = 0

        try:
            while not self._stop_event.is_set():
                delay = next_tick - loop.time()
                if delay > 0 and await self._wait_for_stop(delay):
                    break

                if not await self._run_tick_until_stopped():
                    break

                completed += 1
                if max_ticks is not None and completed >= max_ticks:
                    break

                next_tick = max(next_tick + interval, loop.time())
        finally:
            self._state = DispatcherState.STOPPED
            logger.info(f"Dispatcher stopped after {completed} ticks")

        return completed

    def stop(self) -> None:
        """Request the run loop to stop."""
        self._stop_event.set()
