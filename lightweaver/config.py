"""
Configuration and utility functions for Light Weaver.

This module provides:
- Global configuration constants (grid dimensions, capacities, light budget)
- Logging setup with automatic file rotation
- Project root path discovery
- Performance monitoring utilities

The configuration system is designed to be imported early and provide
foundational utilities used throughout the application.
"""

import os
import logging
import sys
import time
from datetime import datetime, timedelta
from pathlib import Path
import shutil

# ============================================================================
# CONFIGURATION CONSTANTS
# ============================================================================

# Grid dimensions in cells
GRID_WIDTH = 15  # Horizontal cell count
GRID_HEIGHT = 15  # Vertical cell count

# Fixed capacities
MAX_COLLECTIBLES = 10  # Upper bound on collectibles per level
MAX_PATH_LENGTH = 100  # Upper bound on guaranteed-path waypoints

# Player light budget
MAX_LIGHT_DURATION = 100
LIGHT_DECAY_RATE = 0.5

APP_LOGGER_NAME = 'LightWeaver'


# ============================================================================
# LOGGING CONFIGURATION
# ============================================================================

def setup_logging(project_root):
    """
    Configure comprehensive logging with automatic file management.

    Creates two directories:
    - log_dump/: Current logs (files less than 1 day old)
    - old_log_dump/: Archived logs (files older than 1 day)

    Log files are named: lightweaver_YYYYMMDD_HHMMSS.log

    Args:
        project_root (Path): Directory that will hold the log directories

    Returns:
        logging.Logger: Configured logger instance for the application
    """
    # Create log directories
    log_dir = Path(project_root) / "log_dump"
    old_log_dir = Path(project_root) / "old_log_dump"

    log_dir.mkdir(parents=True, exist_ok=True)
    old_log_dir.mkdir(parents=True, exist_ok=True)

    # Archive old log files before starting new session
    _archive_old_logs(log_dir, old_log_dir)

    # Generate timestamped log filename
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    log_filename = f"lightweaver_{timestamp}.log"
    log_path = log_dir / log_filename

    # Configure root logger
    logging.basicConfig(
        level=logging.DEBUG,
        format='[%(asctime)s] - [%(name)s] - [%(levelname)s] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[
            logging.FileHandler(log_path, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )

    # Create application logger
    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.info(f"Logging initialized. Log file: {log_path}")

    return logger


def _archive_old_logs(log_dir, archive_dir):
    """
    Move log files older than 1 day to archive directory.

    Args:
        log_dir (Path): Directory containing current logs
        archive_dir (Path): Directory for archived logs

    Returns:
        int: Number of archived files
    """
    cutoff_time = datetime.now() - timedelta(days=1)
    archived = 0

    for log_file in log_dir.glob("*.log"):
        file_mtime = datetime.fromtimestamp(log_file.stat().st_mtime)

        if file_mtime < cutoff_time:
            dest = archive_dir / log_file.name
            shutil.move(str(log_file), str(dest))
            archived += 1
            print(f"Archived old log: {log_file.name}")

    return archived


def get_logger(name=None):
    """
    Get a logger instance for a specific module.

    This should be called at the top of each module:
        logger = get_logger(__name__)

    Args:
        name (str, optional): Logger name, typically __name__

    Returns:
        logging.Logger: Logger instance
    """
    return logging.getLogger(name or APP_LOGGER_NAME)


def get_level_logger():
    """
    Get a specialized logger for level generation.

    Keeps per-attempt generation chatter apart from general application logs.

    Returns:
        logging.Logger: Level generation logger instance
    """
    return logging.getLogger(f'{APP_LOGGER_NAME}.LevelGeneration')


class PerformanceTimer:
    """
    Context manager for timing and logging operation duration.

    Usage:
        with PerformanceTimer(logger, "Operation name"):
            # ... code to time ...

    Attributes:
        logger: Logger instance to use for output
        operation_name: Name of the operation being timed
        start_time: Time when context was entered
        elapsed: Seconds spent inside the context (set on exit)
    """

    def __init__(self, logger, operation_name):
        self.logger = logger
        self.operation_name = operation_name
        self.start_time = None
        self.elapsed = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(f"Starting: {self.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.perf_counter() - self.start_time
        self.logger.info(f"Completed: {self.operation_name} in {self.elapsed:.3f}s")
        return False


# ============================================================================
# PROJECT ROOT DISCOVERY
# ============================================================================

_CACHED_PROJECT_ROOT = None  # Module-level cache


def get_project_root(marker="lightweaver"):
    """
    Automatically find the project root directory.

    Searches upward from the current file location until it finds a directory
    containing the marker folder. The result is cached for subsequent calls.

    Args:
        marker (str): Directory name to search for (default: "lightweaver")

    Returns:
        str: Absolute path to project root directory

    Raises:
        FileNotFoundError: If project root cannot be found
    """
    global _CACHED_PROJECT_ROOT

    logger = get_logger(__name__)

    if _CACHED_PROJECT_ROOT:
        logger.debug(f"Using cached project root: {_CACHED_PROJECT_ROOT}")
        return _CACHED_PROJECT_ROOT

    current_dir = os.path.abspath(os.path.dirname(__file__))
    logger.debug(f"Searching for project root from: {current_dir}")

    # Walk up directory tree
    while True:
        marker_path = os.path.join(current_dir, marker)

        if os.path.exists(marker_path):
            _CACHED_PROJECT_ROOT = current_dir
            logger.info(f"Project root found: {_CACHED_PROJECT_ROOT}")
            return _CACHED_PROJECT_ROOT

        parent_dir = os.path.dirname(current_dir)

        # Reached filesystem root
        if parent_dir == current_dir:
            logger.error(f"Project root not found (searched for '{marker}' directory)")
            raise FileNotFoundError(
                f"Could not find project root containing '{marker}' directory"
            )

        current_dir = parent_dir
