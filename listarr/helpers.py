"""
Miscellaneous helper utilities for Listarr.
"""

import os
from datetime import datetime, timedelta
from functools import lru_cache

from .display import log_info, log_warning


@lru_cache(maxsize=1)
def get_project_root() -> str:
    """
    Get the project root directory path.

    Returns:
        Absolute path to the project root (parent of listarr/).
    """
    return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def default_config_path() -> str:
    """Path of config/config.yml under the project root."""
    return os.path.join(get_project_root(), 'config', 'config.yml')


def cleanup_old_logs(log_dir: str, retention_days: int) -> None:
    """
    Remove log files older than specified retention period.

    Args:
        log_dir: Directory containing log files
        retention_days: Number of days to retain logs (0 = keep all)
    """
    if retention_days <= 0:
        return

    try:
        cutoff_time = datetime.now() - timedelta(days=retention_days)

        for filename in os.listdir(log_dir):
            if not filename.endswith('.log'):
                continue

            filepath = os.path.join(log_dir, filename)
            try:
                file_mtime = datetime.fromtimestamp(os.path.getmtime(filepath))
                if file_mtime < cutoff_time:
                    os.remove(filepath)
                    log_info(f"Removed old log: {filename} (age: {(datetime.now() - file_mtime).days} days)")
            except OSError as e:
                log_warning(f"Failed to remove old log {filename}: {e}")

    except OSError as e:
        log_warning(f"Error during log cleanup: {e}")
