"""
Logging setup for visionary.

Nothing is configured until configure_logging() or set_verbosity() is called,
so library users keep full control of the "visionary" logger tree.

Each verbosity level maps to a LogPolicy:
- 0: INFO; generation activity and timing
- 1: INFO; adds composed prompt text
- 2: DEBUG; adds HTTP detail and request-state transitions
Quiet mode is WARNING with prompts and transitions off.

Request-state transitions (idle/requesting/done) and history changes go to
their own logger, visionary.transitions, so they can be switched on at any
verbosity with VISIONARY_LOG_TRANSITIONS=1.
"""

import logging
import os
from dataclasses import dataclass, replace

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
ROOT_LOGGER_NAME = "visionary"
TRANSITIONS_LOGGER_NAME = ROOT_LOGGER_NAME + ".transitions"

# Composed prompts longer than this are cut when logged
PROMPT_LOG_MAX = 2000


@dataclass(frozen=True)
class LogPolicy:
    """What the visionary loggers emit."""

    level: int
    prompts: bool = False
    transitions: bool = False


VERBOSITY_POLICIES = {
    0: LogPolicy(logging.INFO),
    1: LogPolicy(logging.INFO, prompts=True),
    2: LogPolicy(logging.DEBUG, prompts=True, transitions=True),
}
QUIET_POLICY = LogPolicy(logging.WARNING)

_policy: LogPolicy | None = None


def policy_for(verbose_level: int, quiet: bool = False) -> LogPolicy:
    """Return the policy for a verbosity level (clamped to 0..2) or quiet mode."""
    if quiet:
        return QUIET_POLICY
    return VERBOSITY_POLICIES[min(max(verbose_level, 0), 2)]


def apply_policy(policy: LogPolicy) -> None:
    """Install a stderr handler on first use and set logger levels from policy."""
    global _policy
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(policy.level)
    logging.getLogger(TRANSITIONS_LOGGER_NAME).setLevel(
        logging.INFO if policy.transitions else logging.WARNING
    )
    _policy = policy


def _transitions_from_env() -> bool:
    return os.environ.get("VISIONARY_LOG_TRANSITIONS", "").strip().lower() in ("1", "true", "yes")


def configure_logging(
    verbose_level: int = 0, quiet: bool = False, transitions: bool | None = None
) -> LogPolicy:
    """
    Configure logging for the CLI, the UI or a library caller.

    Args:
        verbose_level: 0, 1 or 2 (see module docstring)
        quiet: WARNING only; overrides verbose_level
        transitions: Force request-state transition logging on or off;
            None reads VISIONARY_LOG_TRANSITIONS

    Returns:
        The policy that was applied
    """
    policy = policy_for(verbose_level, quiet)
    if transitions is None:
        transitions = policy.transitions or _transitions_from_env()
    policy = replace(policy, transitions=transitions)
    apply_policy(policy)
    return policy


def set_verbosity(level: int) -> None:
    """Shortcut for configure_logging(level)."""
    configure_logging(verbose_level=level)


def log_prompts() -> bool:
    """Return True if composed prompt text should be logged."""
    return _policy is not None and _policy.prompts


def prompt_for_log(prompt: str) -> str:
    """Return prompt cut to PROMPT_LOG_MAX characters for logging."""
    if len(prompt) <= PROMPT_LOG_MAX:
        return prompt
    return f"{prompt[:PROMPT_LOG_MAX]}... ({len(prompt)} chars)"


def transitions_logger() -> logging.Logger:
    """Logger for request-state transitions and history changes."""
    return logging.getLogger(TRANSITIONS_LOGGER_NAME)


def get_verbosity_from_env() -> int:
    """Read VISIONARY_VERBOSITY (0, 1 or 2); anything else is 0."""
    raw = os.environ.get("VISIONARY_VERBOSITY", "0").strip()
    return int(raw) if raw in ("0", "1", "2") else 0


def get_logger(name: str) -> logging.Logger:
    """Return a logger under visionary (e.g. visionary.core.image_gen)."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


__all__ = [
    "LogPolicy",
    "configure_logging",
    "get_logger",
    "get_verbosity_from_env",
    "log_prompts",
    "policy_for",
    "prompt_for_log",
    "set_verbosity",
    "transitions_logger",
]
