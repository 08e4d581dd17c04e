"""
Shared utilities for the recipe pipeline.

Provides logging configuration and the small text helpers used across
multiple modules.
"""

import logging
import re
import sys
from pathlib import Path

import html2text


def setup_logging(
    log_file: str | Path | None = None,
    verbose: bool = False,
    log_to_console: bool = True
) -> logging.Logger:
    """
    Configure logging to console and optionally to file.

    Console output goes to stderr so stdout stays free for results.

    Args:
        log_file: Path to log file, or None for console-only
        verbose: If True, set DEBUG level; otherwise INFO
        log_to_console: If True, also log to stderr

    Returns:
        Root logger configured for the application
    """
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger


def normalize_whitespace(text: str) -> str:
    """
    Collapse multiple whitespace characters to single space.

    Examples:
        >>> normalize_whitespace("hello   world")
        'hello world'
        >>> normalize_whitespace("  leading and trailing  ")
        'leading and trailing'
    """
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text).strip()


def html_to_text(html: str) -> str:
    """
    Convert HTML to plain text, one block or list item per line.

    Links, images and emphasis markers are dropped and lines are not
    wrapped, so each paragraph, heading and list item lands on its own line.

    Args:
        html: HTML content to convert

    Returns:
        Plain text version of the HTML
    """
    if not html:
        return ""

    converter = html2text.HTML2Text()
    converter.ignore_links = True
    converter.ignore_images = True
    converter.ignore_emphasis = True
    converter.body_width = 0  # No line wrapping
    converter.unicode_snob = True
    return converter.handle(html).strip()


def split_lines(text: str) -> list[str]:
    """
    Split pasted text into raw lines.

    Line endings of any platform are accepted; blank lines are kept so line
    positions match the input.

    Examples:
        >>> split_lines("Soup\\r\\n2 cups water\\n")
        ['Soup', '2 cups water']
    """
    if not text:
        return []
    return text.splitlines()
