# NOTE:
# Startup diagnostics (logging / crash handler) must be set up
#  before creating the QApplication instance.

import logging
import sys

from PySide6 import QtWidgets

from panomark.app.app_settings_manager import AppSettingsManager
from panomark.app.logging_setup import (
    LogSystem,
    apply_logging_policy,
    install_qt_message_handler,
    setup_startup_logging,
)

logger = logging.getLogger(__name__)


def main() -> int:
    setup_startup_logging(app_name="panomark")
    logs = LogSystem("panomark")
    install_qt_message_handler()

    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication(sys.argv)

    from panomark.ui.mainwindow import MainWindow

    logger.info("App start")
    settings_mgr = AppSettingsManager()
    apply_logging_policy(logs, settings_mgr)

    main_window = MainWindow(settings_mgr)
    main_window.show()

    # Stop logging when Qt quits
    app.aboutToQuit.connect(logs.stop)
    try:
        rc = app.exec()
        logger.info("App exit (rc=%s)", rc)
        return rc
    finally:
        logs.stop()


if __name__ == "__main__":
    sys.exit(main())
