"""
Timer utilities for WeightGraph.

Provides the Qt timer helpers used for debouncing: creating a configured
QTimer bound to a callback, and tearing one down safely.
"""

from typing import Optional, Callable
import logging
from PyQt6.QtCore import QTimer, QObject

from weightgraph import constants

logger = logging.getLogger("WeightGraph.TimerUtils")


def clamp_debounce_interval(interval_ms: int) -> int:
    """
    Constrain a debounce interval to the supported range.

    Args:
        interval_ms: The requested interval in milliseconds.

    Returns:
        int: The interval clamped to [MINIMUM_DEBOUNCE_MS, MAXIMUM_DEBOUNCE_MS].

    Raises:
        ValueError: If `interval_ms` is negative.
    """
    if interval_ms < 0:
        logger.error("Debounce interval cannot be negative: %d", interval_ms)
        raise ValueError(f"Debounce interval cannot be negative: {interval_ms}")
    clamped = max(constants.timers.MINIMUM_DEBOUNCE_MS, min(constants.timers.MAXIMUM_DEBOUNCE_MS, int(interval_ms)))
    if clamped != interval_ms:
        logger.debug("Clamped debounce interval %dms to %dms", interval_ms, clamped)
    return clamped


def create_timer(parent: QObject, callback: Callable[[], None], interval: int, single_shot: bool = False) -> QTimer:
    """
    Create and configure a QTimer instance with the specified callback and interval.

    Args:
        parent: The parent QObject for the timer, ensuring proper memory management.
        callback: The function to call when the timer triggers.
        interval: The timer interval in milliseconds (must be non-negative).
        single_shot: If True, the timer runs once; if False, it repeats indefinitely.

    Returns:
        QTimer: The configured timer instance, ready to be started.

    Raises:
        ValueError: If `interval` is negative or `callback` is not callable.
    """
    if not callable(callback):
        logger.error("Callback must be callable, got %s", type(callback))
        raise ValueError(f"Callback must be callable, got {type(callback)}")
    if interval < 0:
        logger.error("Interval cannot be negative: %d", interval)
        raise ValueError(f"Interval cannot be negative: {interval}")

    timer = QTimer(parent)
    timer.timeout.connect(callback)
    timer.setInterval(interval)
    timer.setSingleShot(single_shot)
    logger.debug("Timer created with interval %dms, single_shot=%s", interval, single_shot)
    return timer


def cleanup_timer(timer: Optional[QTimer]) -> None:
    """
    Stop a QTimer, disconnect its timeout signal and schedule it for deletion.

    Args:
        timer: The QTimer to stop and delete. If None, the function does nothing.
    """
    if timer is None:
        logger.debug("No timer provided for cleanup")
        return

    if timer.isActive():
        timer.stop()
    try:
        timer.timeout.disconnect()
    except TypeError:
        logger.debug("No slots were connected to timer")
    timer.deleteLater()
    logger.debug("Timer scheduled for deletion")
