"""stockstats Main Application."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from typing import TextIO

from stockstats.config_loader import AppConfig
from stockstats.constants import LOG_FORMAT
from stockstats.providers.base import QuoteProvider
from stockstats.providers.registry import get_provider
from stockstats.reporting.csv_reporter import CsvReporter
from stockstats.scheduler.dispatcher import PeriodicFetchDispatcher

logger = logging.getLogger(__name__)


class StockStatsApp:
    """Main application orchestrator."""

    def __init__(
        self,
        config: AppConfig,
        provider: QuoteProvider | None = None,
        stream: TextIO | None = None,
    ):
        self.config = config
        self.provider = provider
        self.stream = stream

        # Components
        self.reporter: CsvReporter | None = None
        self.dispatcher: PeriodicFetchDispatcher | None = None

    def _setup_logging(self) -> None:
        # Diagnostics go to stderr so they never mix with the CSV on stdout
        logging.basicConfig(
            level=self.config.environment.log_level.value,
            format=LOG_FORMAT,
            stream=sys.stderr,
        )

    def initialize(self) -> None:
        """Build provider, reporter and dispatcher."""
        self._setup_logging()
        logger.info("Initializing stockstats...")

        if self.provider is None:
            self.provider = get_provider(self.config)

        self.reporter = CsvReporter(self.stream)
        self.dispatcher = PeriodicFetchDispatcher(
            self.config.tracker, self.provider, self.reporter
        )

    async def run(self, max_ticks: int | None = None) -> int:
        """
        Run the dispatch loop until a signal arrives or max_ticks is reached.

        Returns:
            Number of completed ticks.
        """
        if self.dispatcher is None:
            self.initialize()

        # Trap signals
        loop = asyncio.get_running_loop()
        installed: list[signal.Signals] = []
        try:
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, self._handle_signal)
                installed.append(sig)
        except (NotImplementedError, RuntimeError):
            logger.warning(
                "Signal handlers not supported in this environment (likely Windows). Use Ctrl+C to stop."
            )

        try:
            return await self.dispatcher.run(max_ticks=max_ticks)
        finally:
            logger.info("Shutting down...")
            for sig in installed:
                loop.remove_signal_handler(sig)
            await self.provider.close()
            logger.info("Shutdown complete.")

    def _handle_signal(self) -> None:
        logger.info("Signal received, initiating shutdown...")
        if self.dispatcher is not None:
            self.dispatcher.stop()
