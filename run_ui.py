"""Run the Family Graph UI."""

from kinforce.config import settings
from kinforce.logging_setup import configure_logging
from kinforce.ui.app import run_app

if __name__ in {"__main__", "__mp_main__"}:
    configure_logging(settings.log_level)
    run_app(settings)
