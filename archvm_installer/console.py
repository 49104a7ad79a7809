"""
Operator-facing terminal output and prompts.

Section and step messages are printed in color for the person at the console
and mirrored to the log file, so the log reads like the screen did.
"""
from __future__ import annotations

import getpass
import logging
import sys

logger = logging.getLogger("archvm_installer")


class TermColors:
    """ANSI color codes for terminal output"""
    SECTION = '\033[0;34m'  # Blue arrow for sections
    SUCCESS = '\033[0;32m'  # Green section titles
    STEP = '\033[0;33m'     # Yellow arrow for steps
    ERROR = '\033[0;31m'    # Red errors
    ENDC = '\033[0m'


_color_enabled = True


def set_color(enabled: bool) -> None:
    global _color_enabled
    _color_enabled = enabled


def colorize(message: str, color: str, enabled: bool | None = None) -> str:
    """
    Add color to a message if color output is enabled.

    Args:
        message: The message to colorize
        color: The color to use (from TermColors)
        enabled: Override the module-wide setting

    Returns:
        Colorized message or original message if colors disabled
    """
    if enabled is None:
        enabled = _color_enabled
    if not enabled:
        return message
    return f"{color}{message}{TermColors.ENDC}"


def section(title: str) -> None:
    print(f"{colorize('==>', TermColors.SECTION)} {colorize(title, TermColors.SUCCESS)}", flush=True)
    logger.info("==> %s", title)


def step(message: str) -> None:
    print(f"{colorize('-->', TermColors.STEP)} {message}", flush=True)
    logger.info("--> %s", message)


def error(message: str) -> None:
    print(colorize(f"Error: {message}", TermColors.ERROR), file=sys.stderr, flush=True)
    logger.error("%s", message)


def echo(message: str = "") -> None:
    print(message, flush=True)


def ask(question: str) -> str:
    answer = input(question)
    logger.info("Prompt %r answered %r", question.strip(), answer)
    return answer


def confirm(question: str) -> bool:
    """[y/N] prompt: exactly one y or Y is a yes, everything else a no."""

    answer = input(f"{question} [y/N] ")
    accepted = answer.strip() in {"y", "Y"}
    logger.info("Confirm %r -> %s", question, "yes" if accepted else "no")
    return accepted


def ask_secret(question: str) -> str:
    return getpass.getpass(question)
