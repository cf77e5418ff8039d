"""
Path management for the strategy builder engine

Handles platform-specific user data directories following standard conventions:
- macOS: ~/Library/Application Support/StrategyBuilder/
- Linux: ~/.local/share/strategy-builder/
- Windows: %APPDATA%/StrategyBuilder/

The engine itself never writes strategies to disk; these locations are only
used for log files and exported documents.
"""
import os
import sys
from pathlib import Path


APP_NAME = "StrategyBuilder"
APP_SLUG = "strategy-builder"


def get_user_data_dir() -> Path:
    """
    Get platform-specific user data directory.

    Returns:
        Path to user data directory (created if missing).
    """
    system = sys.platform

    if system == "darwin":  # macOS
        user_data_dir = Path.home() / "Library" / "Application Support" / APP_NAME
    elif system == "win32":  # Windows
        user_data_dir = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming")) / APP_NAME
    else:  # Linux and other Unix-like
        user_data_dir = Path.home() / ".local" / "share" / APP_SLUG

    user_data_dir.mkdir(parents=True, exist_ok=True)
    return user_data_dir


def get_logs_dir() -> Path:
    """
    Get directory for engine logs.

    Returns:
        Path to logs directory (stored in user data directory).
    """
    logs_dir = get_user_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir


def get_exports_dir() -> Path:
    """Directory where exported strategy documents are written by default."""
    exports_dir = get_user_data_dir() / "exports"
    exports_dir.mkdir(parents=True, exist_ok=True)
    return exports_dir
