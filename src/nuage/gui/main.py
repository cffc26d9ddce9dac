"""GUI entry point for the Nuage desktop client."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from ..appctx import AppContext
from ..errors import CatalogError
from .ui.main_window import MainWindow
from .ui.tasks.fetch_scheduler import QtFetchScheduler
from .utils.console_logger import ensure_console_logger

LOGGER = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Launch the Qt application and return the exit code."""

    arguments = list(sys.argv if argv is None else argv)
    app = QApplication(arguments)
    ensure_console_logger(logging.getLogger("nuage"), "nuage-gui")

    scheduler = QtFetchScheduler(parent=app)
    context = AppContext(scheduler=scheduler)
    # Allow opening a catalog directly via argv[1].
    catalog = Path(arguments[1]) if len(arguments) > 1 else None
    try:
        context.open_catalog(catalog)
    except CatalogError as exc:
        LOGGER.error("%s", exc)
        return 1

    window = MainWindow(context)
    window.show()
    window.start()
    exit_code = app.exec()
    context.event_bus.shutdown()
    return exit_code


if __name__ == "__main__":  # pragma: no cover - manual launch
    raise SystemExit(main())
