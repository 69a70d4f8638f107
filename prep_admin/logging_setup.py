from __future__ import annotations
import logging

# Third-party loggers that flood DEBUG output (image decoding, HTTP pools, form parsing)
NOISY_LOGGERS = ("PIL", "urllib3", "multipart", "python_multipart")


def setup_console_logging(level: int | str = logging.INFO) -> None:
    """
    Configure the root logger for the API and the maintenance CLI.

    Safe to call more than once: later calls only change the level.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
