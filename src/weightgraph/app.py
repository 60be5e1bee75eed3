"""
Application entry point for WeightGraph.
"""

import logging
import signal
import sys

from PyQt6.QtWidgets import QApplication, QMessageBox

from weightgraph import constants
from weightgraph.core.coordinator import ChartCoordinator
from weightgraph.core.policy import PipelinePolicy
from weightgraph.core.provider import SyntheticProvider
from weightgraph.core.store import TimeSeriesStore
from weightgraph.utils.config import ConfigManager
from weightgraph.utils.helpers import get_app_data_path, setup_logging
from weightgraph.utils.preferences import PreferenceStore
from weightgraph.views.chart.window import ChartWindow


def main() -> int:
    """
    Main entry point for the WeightGraph application.

    Orchestrates the startup sequence:
    1. Sets up logging.
    2. Loads configuration and builds the pipeline policy from it.
    3. Creates the store, the coordinator and the chart window.
    4. Runs the Qt event loop.

    Returns:
        An integer exit code.
    """
    setup_logging()
    logger = logging.getLogger("WeightGraph.Main")
    app = QApplication(sys.argv)

    try:
        config = ConfigManager().load()
        policy = PipelinePolicy.from_config(config)
        preferences = PreferenceStore(get_app_data_path() / constants.config.defaults.PREFERENCES_FILENAME)

        store = TimeSeriesStore(SyntheticProvider(), policy=policy)
        coordinator = ChartCoordinator(
            store,
            policy=policy,
            preferences=preferences,
            target_range_kg=(config["target_min_kg"], config["target_max_kg"]),
            show_bmi=config["show_bmi"],
        )
        window = ChartWindow(coordinator)

        signal.signal(signal.SIGINT, lambda s, f: QApplication.instance().quit())
        signal.signal(signal.SIGTERM, lambda s, f: QApplication.instance().quit())

        logger.info("Starting %s %s", constants.app.APP_NAME, constants.app.VERSION)
        window.show()
        exit_code = app.exec()
        store.wait_for_done()
        return exit_code

    except Exception as e:
        logger.critical("A critical error occurred during startup: %s", e, exc_info=True)
        QMessageBox.critical(None, "Application Error", f"A critical error occurred and WeightGraph must close:\n\n{e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
