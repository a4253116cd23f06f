import sys
import logging

from PyQt5.QtWidgets import QApplication

from tracker_pkg.config import Settings
from tracker_pkg.logging_config import configure_logging
from tracker_pkg.qt_viewer import GlobeWindow

logger = logging.getLogger("tracker")


def main():
    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.log_file)

    logger.info("--- SATELLITE GLOBE TRACKER STARTED ---")
    logger.info("TLE source: %s", settings.tle_api_url)
    logger.info("Initial satellites: %s", ", ".join(settings.satellite_ids) or "(none)")

    app = QApplication(sys.argv)
    window = GlobeWindow(settings)
    window.show()
    window.start()

    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
