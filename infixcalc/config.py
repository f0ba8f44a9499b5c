"""Runtime settings for infixcalc, read from the environment.

Each INFIXCALC_* variable has a default; CLI flags override what is read here.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from infixcalc.models import FlushPolicy

DEFAULT_PROMPT = "(expr): "

_ENV_PREFIX = "INFIXCALC_"


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for a CLI session."""

    flush_policy: FlushPolicy = FlushPolicy.LEGACY
    prompt: str = DEFAULT_PROMPT
    log_level: int = logging.WARNING

    def override(
        self,
        standard: bool = False,
        verbose: bool = False,
    ) -> Settings:
        """Apply CLI flags on top of the environment values."""
        settings = self
        if standard:
            settings = replace(settings, flush_policy=FlushPolicy.STANDARD)
        if verbose:
            settings = replace(settings, log_level=logging.DEBUG)
        return settings


def _parse_log_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid {_ENV_PREFIX}LOG_LEVEL: {name!r}")
    return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from INFIXCALC_* variables.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Raises:
        ValueError: an INFIXCALC_* variable holds an unknown value.
    """
    env = os.environ if environ is None else environ

    raw_policy = env.get(f"{_ENV_PREFIX}FLUSH_POLICY", FlushPolicy.LEGACY.value)
    try:
        policy = FlushPolicy(raw_policy.strip().lower())
    except ValueError:
        raise ValueError(
            f"Invalid {_ENV_PREFIX}FLUSH_POLICY: {raw_policy!r}. Choose: legacy, standard"
        ) from None

    return Settings(
        flush_policy=policy,
        prompt=env.get(f"{_ENV_PREFIX}PROMPT", DEFAULT_PROMPT),
        log_level=_parse_log_level(env.get(f"{_ENV_PREFIX}LOG_LEVEL", "WARNING")),
    )
