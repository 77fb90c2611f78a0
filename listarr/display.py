"""
Display and logging utilities for Listarr.
Handles colored output, log file setup, and outcome formatting.
"""

import os
import re
import logging
from datetime import datetime
from typing import Dict, List, Optional

# ANSI color codes
RED = '\033[91m'
GREEN = '\033[92m'
YELLOW = '\033[93m'
CYAN = '\033[96m'
RESET = '\033[0m'

# ANSI pattern for stripping color codes from log files
ANSI_PATTERN = re.compile(r'\x1b\[[0-9;]*m')

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

logger = logging.getLogger('listarr')


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to log levels"""

    LEVEL_COLORS = {
        logging.DEBUG: CYAN,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: RED,
    }

    def format(self, record):
        # Color a copy so file handlers sharing the record see the plain name
        record = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelno, '')
        record.levelname = f"{color}{record.levelname}{RESET}"
        return super().format(record)


class PlainFormatter(logging.Formatter):
    """Formatter for log files: strips any ANSI codes from the message."""

    def format(self, record):
        return ANSI_PATTERN.sub('', super().format(record))


def setup_logging(debug: bool = False, config: dict = None,
                  log_dir: Optional[str] = None,
                  retention_days: int = 0) -> logging.Logger:
    """
    Configure logging for the list manager.

    Args:
        debug: If True, set level to DEBUG. Otherwise use config or default to INFO.
        config: Optional config dict that may contain logging.level setting.
        log_dir: Optional directory for a timestamped plain-text log file.
        retention_days: Days to keep old log files (0 = keep all).

    Returns:
        Configured logger instance.
    """
    if debug:
        level = logging.DEBUG
    elif config and (config.get('logging') or {}).get('level'):
        level_str = config['logging']['level'].upper()
        level = getattr(logging, level_str, logging.INFO)
    else:
        level = logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    # Remove existing handlers to avoid duplicates
    root_logger.handlers = []
    root_logger.addHandler(handler)

    if log_dir:
        from .helpers import cleanup_old_logs

        os.makedirs(log_dir, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        file_handler = logging.FileHandler(
            os.path.join(log_dir, f"listarr_{timestamp}.log"), encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(PlainFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root_logger.addHandler(file_handler)
        cleanup_old_logs(log_dir, retention_days)

    # Suppress noisy third-party loggers
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)

    app_logger = logging.getLogger('listarr')
    app_logger.setLevel(level)
    return app_logger


def print_status(message: str, level: str = "info"):
    """Print a status message with appropriate color and log it"""
    if level == "success":
        print(f"{GREEN}{message}{RESET}")
        logger.info(message)
    elif level == "warning":
        log_warning(message)
    elif level == "error":
        log_error(message)
    else:
        print(message)
        logger.info(message)


def log_info(message: str):
    """Log info and print without color"""
    logger.info(message)
    print(message)


def log_warning(message: str):
    """Log warning and print with yellow color"""
    logger.warning(message)
    print(f"{YELLOW}{message}{RESET}")


def log_error(message: str):
    """Log error and print with red color"""
    logger.error(message)
    print(f"{RED}{message}{RESET}")


STATUS_COLORS = {
    'added': GREEN,
    'exists': CYAN,
    'not_found': YELLOW,
    'unsupported': YELLOW,
    'error': RED,
}


def format_outcome(outcome, index: int = None) -> str:
    """
    Format one SyncOutcome as a single display line.

    Args:
        outcome: SyncOutcome to render
        index: Optional 1-based position in the batch

    Returns:
        Colored line such as "1. imdb:tt0111161 -> added: The Shawshank Redemption (1994)"
    """
    status = outcome.status
    color = STATUS_COLORS.get(status, '')
    prefix = f"{index}. " if index else ""
    label = outcome.item.spec if outcome.item else 'direct add'
    line = f"{prefix}{label} -> {color}{status}{RESET}"

    if outcome.record:
        line += f": {outcome.record.display_title}"
    if outcome.message and status != 'added':
        line += f" ({outcome.message})"
    return line


def format_candidate(record, index: int = None) -> str:
    """
    Format a CandidateRecord for search output.

    Args:
        record: CandidateRecord to render
        index: Optional 1-based index for numbered lists

    Returns:
        Multi-line string with title, ids, poster and a truncated overview
    """
    lines = []
    prefix = f"{index}. " if index else ""
    lines.append(f"{prefix}{CYAN}{record.display_title}{RESET}")

    ids = record.external_ids.as_dict()
    if ids:
        lines.append(f"  {YELLOW}IDs:{RESET} " + ', '.join(f"{k}={v}" for k, v in ids.items()))
    if record.image_url:
        lines.append(f"  {YELLOW}Poster:{RESET} {record.image_url}")
    if record.overview:
        overview = record.overview
        if len(overview) > 200:
            overview = overview[:197] + "..."
        lines.append(f"  {overview}")

    return '\n'.join(lines)


def summarize_outcomes(outcomes: List) -> Dict[str, int]:
    """Count outcomes per terminal state, preserving first-seen order."""
    counts: Dict[str, int] = {}
    for outcome in outcomes:
        counts[outcome.status] = counts.get(outcome.status, 0) + 1
    return counts
