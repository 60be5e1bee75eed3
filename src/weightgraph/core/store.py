"""
Repository of raw weight and BMI series, refreshed from a provider.

A refresh fetches every (span, metric) pair concurrently on a background
thread and publishes them together on the UI thread. Each refresh carries a
generation number; only the newest generation may publish, so a slow older
refresh can never overwrite a newer one.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Tuple

from PyQt6.QtCore import QCoreApplication, QObject, QRunnable, QThreadPool, pyqtSignal

from weightgraph import constants
from weightgraph.core.policy import DEFAULT_POLICY, PipelinePolicy
from weightgraph.core.provider import StatisticsProvider
from weightgraph.core.series import Bin, Metric, Series, Span, sanitize_bins

SeriesKey = Tuple[Span, Metric]

logger = logging.getLogger("WeightGraph.TimeSeriesStore")


class FetchFailure(Exception):
    """A provider call failed during a refresh."""

    def __init__(self, span: Span, metric: Metric, cause: BaseException) -> None:
        super().__init__(f"Fetching {metric.value} for {span.value} failed: {cause}")
        self.span = span
        self.metric = metric
        self.cause = cause


def _fetch_one(provider: StatisticsProvider, span: Span, metric: Metric) -> Series:
    try:
        raw: List[Bin] = provider.bins(span) if metric is Metric.WEIGHT else provider.bmi_bins(span)
        return sanitize_bins(raw)
    except Exception as e:
        raise FetchFailure(span, metric, e) from e


def fetch_all(provider: StatisticsProvider) -> Dict[SeriesKey, Series]:
    """
    Runs all span x metric fetches concurrently and joins them.

    Raises:
        FetchFailure: If any single fetch fails; the partial results are discarded.
    """
    keys = [(span, metric) for span in Span for metric in Metric]
    with ThreadPoolExecutor(max_workers=len(keys), thread_name_prefix="WeightGraphFetch") as executor:
        futures = {key: executor.submit(_fetch_one, provider, *key) for key in keys}
        return {key: future.result() for key, future in futures.items()}


class FetchSignals(QObject):
    """Signals for a refresh task; QRunnable itself cannot carry signals."""
    finished = pyqtSignal(int, object)  # generation, Dict[SeriesKey, Series]
    failed = pyqtSignal(int, str)  # generation, message
    cancelled = pyqtSignal(int)  # generation


class RefreshTask(QRunnable):
    """Background job performing one refresh generation."""

    def __init__(self, provider: StatisticsProvider, generation: int) -> None:
        super().__init__()
        self.provider = provider
        self.generation = generation
        self.signals = FetchSignals()
        self._cancelled = threading.Event()
        # The store keeps the task alive until its result is delivered.
        self.setAutoDelete(False)

    def cancel(self) -> None:
        """Marks the task superseded; it reports `cancelled` instead of its result."""
        self._cancelled.set()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    def run(self) -> None:
        try:
            payload = fetch_all(self.provider)
        except FetchFailure as e:
            if self.is_cancelled:
                self.signals.cancelled.emit(self.generation)
            else:
                self.signals.failed.emit(self.generation, str(e))
            return
        except Exception as e:
            logger.error("Unexpected error in refresh generation %d: %s", self.generation, e, exc_info=True)
            if self.is_cancelled:
                self.signals.cancelled.emit(self.generation)
            else:
                self.signals.failed.emit(self.generation, str(e))
            return
        if self.is_cancelled:
            self.signals.cancelled.emit(self.generation)
            return
        self.signals.finished.emit(self.generation, payload)


class TimeSeriesStore(QObject):
    """
    Owns the raw series for every span and metric.

    Consumers read snapshots through `series_for`; only this class replaces
    them. `data_version` increases by one on every published refresh.
    """
    data_published = pyqtSignal(int)  # new data_version
    refresh_failed = pyqtSignal(str)

    def __init__(self, provider: StatisticsProvider, policy: PipelinePolicy = DEFAULT_POLICY,
                 clock: Callable[[], float] = time.monotonic, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.provider = provider
        self.policy = policy
        self._clock = clock
        self.logger = logger

        self._series: Dict[SeriesKey, Series] = {}
        self._generation = 0
        self._data_version = 0
        self._last_refresh: Optional[float] = None
        self._tasks: Dict[int, RefreshTask] = {}

        self._pool = QThreadPool(self)
        self._pool.setMaxThreadCount(4)

    @property
    def data_version(self) -> int:
        return self._data_version

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_refreshing(self) -> bool:
        return bool(self._tasks)

    @property
    def has_data(self) -> bool:
        return any(self._series.values())

    def series_for(self, span: Span, metric: Metric) -> Series:
        """Returns the last published series, or an empty one if nothing was fetched yet."""
        return self._series.get((span, metric), ())

    def is_fresh(self) -> bool:
        """True while the last successful refresh is younger than the expiry interval and holds data."""
        if self._last_refresh is None or not self.has_data:
            return False
        return self._clock() - self._last_refresh < self.policy.cache_expiry_seconds

    def refresh(self, force: bool = False) -> None:
        """
        Starts a background refresh, superseding any refresh still in flight.

        A non-forced refresh is skipped while the cached data is fresh. Failures
        leave the previously published data untouched and are reported through
        `refresh_failed`.
        """
        if not force and self.is_fresh():
            self.logger.debug("Skipping refresh, cached data is %.0fs old.", self._clock() - self._last_refresh)
            return

        for stale in self._tasks.values():
            stale.cancel()

        self._generation += 1
        task = RefreshTask(self.provider, self._generation)
        task.signals.finished.connect(self._on_fetch_finished)
        task.signals.failed.connect(self._on_fetch_failed)
        task.signals.cancelled.connect(self._on_fetch_cancelled)
        self._tasks[self._generation] = task

        self.logger.debug("Starting refresh generation %d (force=%s, in flight=%d)",
                          self._generation, force, len(self._tasks))
        self._pool.start(task)

    def wait_for_done(self, msecs: int = constants.timers.REFRESH_WAIT_TIMEOUT_MS) -> bool:
        """Blocks until background fetches finish, then delivers their queued results."""
        done = self._pool.waitForDone(msecs)
        QCoreApplication.processEvents()
        return done

    def _on_fetch_finished(self, generation: int, payload: Dict[SeriesKey, Series]) -> None:
        self._tasks.pop(generation, None)
        if generation != self._generation:
            self.logger.debug("Discarding results of superseded refresh generation %d (current %d)",
                              generation, self._generation)
            return

        self._series = dict(payload)
        self._data_version += 1
        self._last_refresh = self._clock()
        self.logger.info("Published refresh generation %d as data version %d (%d points)",
                         generation, self._data_version, sum(len(s) for s in self._series.values()))
        self.data_published.emit(self._data_version)

    def _on_fetch_failed(self, generation: int, message: str) -> None:
        self._tasks.pop(generation, None)
        if generation != self._generation:
            self.logger.debug("Ignoring failure of superseded refresh generation %d: %s", generation, message)
            return

        self.logger.error("Refresh generation %d failed, keeping data version %d: %s",
                          generation, self._data_version, message)
        self.refresh_failed.emit(message)

    def _on_fetch_cancelled(self, generation: int) -> None:
        self._tasks.pop(generation, None)
        self.logger.debug("Refresh generation %d was superseded before publishing", generation)
