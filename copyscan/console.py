#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Console Output

Colour-tagged log helpers, banner and progress bar rendering for the
command line front end, plus a logging handler that routes the engine's
log records through the same helpers.
"""

import logging
import sys
import time
from typing import Optional

# ============================================================
# Color and Display Utilities
# ============================================================


class Colors:
    """ANSI color codes for terminal output"""

    RED = "\033[0;31m"
    GREEN = "\033[0;32m"
    YELLOW = "\033[1;33m"
    BLUE = "\033[0;34m"
    CYAN = "\033[0;36m"
    MAGENTA = "\033[0;35m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    NC = "\033[0m"  # No Color

    @classmethod
    def disable(cls):
        """Disable colors for non-TTY output"""
        cls.RED = cls.GREEN = cls.YELLOW = cls.BLUE = ""
        cls.CYAN = cls.MAGENTA = cls.BOLD = cls.DIM = cls.NC = ""


def log_info(msg: str):
    print(f"{Colors.GREEN}[INFO]{Colors.NC} {msg}")


def log_warn(msg: str):
    print(f"{Colors.YELLOW}[WARN]{Colors.NC} {msg}")


def log_error(msg: str):
    print(f"{Colors.RED}[ERROR]{Colors.NC} {msg}", file=sys.stderr)


def log_step(msg: str):
    print(f"{Colors.MAGENTA}[STEP]{Colors.NC} {msg}")


def format_time(seconds: float) -> str:
    """Format seconds to human-readable time"""
    if seconds < 60:
        return f"{seconds:.1f}s"
    seconds = int(seconds)
    if seconds < 3600:
        mins, secs = divmod(seconds, 60)
        return f"{mins}m{secs}s"
    hours, remainder = divmod(seconds, 3600)
    return f"{hours}h{remainder // 60}m"


def print_banner():
    """Print the program banner"""
    print(f"{Colors.BLUE}")
    print("╔══════════════════════════════════════════════════════════════╗")
    print("║              CopyScan - Source Similarity Scanner            ║")
    print("║       Edit, token, fingerprint and parse tree metrics        ║")
    print("╚══════════════════════════════════════════════════════════════╝")
    print(f"{Colors.NC}")


def draw_box(title: str, subtitle: str = "", color: Optional[str] = None) -> str:
    """Draw a text box with title"""
    if color is None:
        color = Colors.BLUE
    width = max(50, len(title) + 6, len(subtitle) + 6)
    width = min(80, width)

    line = "═" * width

    pad_left = (width - len(title)) // 2
    pad_right = width - len(title) - pad_left
    title_line = f"║{' ' * pad_left}{title}{' ' * pad_right}║"

    result = f"{color}╔{line}╗{Colors.NC}\n"
    result += f"{color}{title_line}{Colors.NC}\n"

    if subtitle:
        pad_left = (width - len(subtitle)) // 2
        pad_right = width - len(subtitle) - pad_left
        subtitle_line = f"║{' ' * pad_left}{subtitle}{' ' * pad_right}║"
        result += f"{color}{subtitle_line}{Colors.NC}\n"

    result += f"{color}╚{line}╝{Colors.NC}"
    return result


def draw_progress_bar(current: int, total: int, width: int = 40) -> str:
    """Draw a progress bar"""
    if total == 0:
        return "░" * width

    filled = int(current * width / total)
    empty = width - filled
    return "█" * filled + "░" * empty


def show_progress(phase: str, current: int, total: int, elapsed: float, eta: float = 0):
    """Redraw the single progress line for a phase"""
    if total <= 0:
        return

    percentage = current * 100 // total
    bar = draw_progress_bar(current, total)

    progress_line = (
        f"{Colors.CYAN}[{bar}]{Colors.NC} {Colors.BOLD}{percentage}%{Colors.NC} "
        f"({current}/{total}) {Colors.DIM}{phase}{Colors.NC}"
    )
    if eta > 0:
        progress_line += (
            f" | Elapsed: {format_time(elapsed)} | "
            f"ETA: {Colors.YELLOW}{format_time(eta)}{Colors.NC}"
        )
    else:
        progress_line += f" | Elapsed: {format_time(elapsed)}"

    sys.stdout.write(f"\r\033[K{progress_line}")
    sys.stdout.flush()


def show_progress_final(phase: str, total: int, elapsed: float):
    """Show final completed progress bar"""
    bar = draw_progress_bar(total, total)
    sys.stdout.write(
        f"\r\033[K{Colors.GREEN}[{bar}]{Colors.NC} {Colors.BOLD}100%{Colors.NC} "
        f"({total}/{total}) {phase} | Total: {format_time(elapsed)}\n"
    )
    sys.stdout.flush()


# ============================================================
# Progress Observer
# ============================================================


class ConsoleProgress:
    """
    Progress observer that draws one bar per scan phase.

    Called as observer(phase_name, completed, total) by the engine. Redraws
    are throttled to a handful per second.
    """

    def __init__(self, min_interval: float = 0.1):
        self.min_interval = min_interval
        self.phase: Optional[str] = None
        self.phase_start = 0.0
        self.last_draw = 0.0

    def __call__(self, phase: str, completed: int, total: int):
        now = time.time()
        if phase != self.phase:
            self.phase = phase
            self.phase_start = now
            self.last_draw = 0.0

        elapsed = now - self.phase_start
        if completed >= total:
            show_progress_final(phase, total, elapsed)
            return
        if now - self.last_draw < self.min_interval:
            return

        self.last_draw = now
        eta = 0.0
        if completed > 0:
            eta = elapsed / completed * (total - completed)
        show_progress(phase, completed, total, elapsed, eta)


# ============================================================
# Logging Bridge
# ============================================================


class ConsoleLogHandler(logging.Handler):
    """Render engine log records with the colour-tagged console helpers"""

    def emit(self, record: logging.LogRecord):
        try:
            msg = self.format(record)
        except Exception:
            self.handleError(record)
            return

        if record.levelno >= logging.ERROR:
            log_error(msg)
        elif record.levelno >= logging.WARNING:
            log_warn(msg)
        else:
            log_info(msg)


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Handler:
    """Attach a ConsoleLogHandler to the copyscan logger"""
    logger = logging.getLogger("copyscan")
    for handler in list(logger.handlers):
        if isinstance(handler, ConsoleLogHandler):
            logger.removeHandler(handler)

    handler = ConsoleLogHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    if verbose:
        logger.setLevel(logging.DEBUG)
    elif quiet:
        logger.setLevel(logging.ERROR)
    else:
        logger.setLevel(logging.WARNING)
    logger.addHandler(handler)
    logger.propagate = False
    return handler
