"""
Logging setup for genepool runs.

Engine components tag their lines with a ``[Component]`` prefix, so the console
sink keeps the line short: time, level, run name and message. The file sink
adds the source location. ``genepool`` modules get their own level, which lets
a driver script keep its own output at INFO while the engine reports every
generation at DEBUG (or every member at TRACE).
"""

from datetime import datetime, timezone
import os
import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[run]}</magenta> | "
    "<level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[run]} | "
    "{name}:{function}:{line} | {message}"
)


def _module_levels(level: str, engine_level: str | None) -> dict[str, str]:
    return {"": level, "genepool": engine_level or level}


def setup_logger(
    run_name: str = "evolution",
    log_dir: str | None = "logs",
    level: str = "INFO",
    engine_level: str | None = None,
    rotation: str = "50 MB",
    retention: str = "30 days",
    enable_colors: bool = True,
) -> str | None:
    """
    Route loguru output for one evolution run.

    Args:
        run_name: Label bound to every record and used as the log file prefix
        log_dir: Directory for the log file; ``None`` logs to the console only
        level: Level for everything outside the ``genepool`` package
        engine_level: Level for ``genepool`` modules (defaults to *level*)
        rotation: Log rotation policy (e.g., "50 MB", "1 day")
        retention: Log retention policy (e.g., "30 days", "1 month")
        enable_colors: Whether to enable colored console output

    Returns:
        Path to the log file, or ``None`` when no file sink was added
    """
    logger.remove()
    logger.configure(extra={"run": run_name})
    levels = _module_levels(level, engine_level)

    colorize = enable_colors and sys.stdout.isatty()
    logger.add(
        sys.stdout,
        level="TRACE",
        filter=levels,
        format=CONSOLE_FORMAT,
        colorize=colorize,
        backtrace=True,
        diagnose=False,
    )

    log_file = None
    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        log_file = os.path.join(log_dir, f"{run_name}_{timestamp}.log")
        logger.add(
            log_file,
            level="TRACE",
            filter=levels,
            format=FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
            backtrace=True,
            diagnose=False,
        )

    logger.debug("Log levels: {}, colors: {}, file: {}", levels, colorize, log_file)
    return log_file
