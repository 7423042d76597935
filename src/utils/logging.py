import logging
import sys
import os
from typing import Optional


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for different log levels"""

    # Color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",  # Reset
    }

    def format(self, record):
        # Get the original formatted message
        log_message = super().format(record)

        # Add color based on log level
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        return f"{color}{log_message}{self.COLORS['RESET']}"


def supports_color() -> bool:
    """
    Check if the terminal supports color output.

    Returns:
        True if colors are supported, False otherwise
    """
    # Force colors if FORCE_COLOR is set
    if os.getenv("FORCE_COLOR"):
        return True

    # Check environment variables that disable colors
    if os.getenv("NO_COLOR") or os.getenv("CI"):
        return False

    # Check if we're in a terminal
    if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
        return False

    # Check TERM environment variable for color support
    term = os.getenv("TERM", "").lower()
    return term not in ["dumb", "unknown"]


def setup_logging(level: str = "INFO", use_colors: bool = None) -> None:
    """
    Setup centralized logging configuration for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_colors: Whether to use colored output (auto-detected if None)
    """
    # Convert string level to logging constant
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Auto-detect color support if not specified
    if use_colors is None:
        use_colors = supports_color()

    # Create console handler
    console_handler = logging.StreamHandler(sys.stdout)

    # Create formatter (colored or plain)
    formatter_class = ColoredFormatter if use_colors else logging.Formatter
    formatter = formatter_class(
        fmt="%(asctime)s | %(levelname)s | %(filename)s:%(lineno)d | %(message)s",
        datefmt="%d-%m-%Y %H:%M:%S",
    )

    # Set formatter for console handler
    console_handler.setFormatter(formatter)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    # Filter out external library logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance with the configured format.

    Args:
        name: Logger name (optional, defaults to module name)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
