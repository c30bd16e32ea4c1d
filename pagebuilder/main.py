import logging
import os
import sys

from PyQt6 import QtWidgets

from .ui.main_window import APP_TITLE, MainWindow


def main() -> int:
    logging.basicConfig(
        level=os.getenv("PAGEBUILDER_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QtWidgets.QApplication(sys.argv)
    app.setApplicationName(APP_TITLE)
    win = MainWindow()
    win.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
