"""
Opt-in switch for the insecure deterministic proof path.

WARNING: enabling this flag allows proofs whose nonce is derivable from
public data. Only reproducible tests and simulations should turn it on.
"""

from __future__ import annotations

import os
from typing import Final

from .config import INSECURE_DETERMINISTIC_ENV_VAR

_TRUE_VALUES: Final[tuple[str, ...]] = ("1", "true", "yes", "on")
_FALSE_VALUES: Final[tuple[str, ...]] = ("0", "false", "no", "off")
_DEFAULT_ENABLED: Final[bool] = False

_insecure_override: bool | None = None


def _parse_flag(value: str | None) -> bool | None:
    if value is None:
        return None

    normalized = value.strip().lower()
    if normalized == "":
        return None

    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False

    raise ValueError(
        f"Invalid value for {INSECURE_DETERMINISTIC_ENV_VAR}: {value!r}. "
        f"Valid options: {', '.join(_TRUE_VALUES + _FALSE_VALUES)}"
    )


def insecure_deterministic_enabled() -> bool:
    """
    Resolve whether the insecure deterministic path is allowed.

    Precedence: in-memory override, then environment variable, then off.

    Raises:
        ValueError: If the environment variable holds an unknown value.
    """
    if _insecure_override is not None:
        return _insecure_override

    env_value = _parse_flag(os.getenv(INSECURE_DETERMINISTIC_ENV_VAR))
    if env_value is not None:
        return env_value

    return _DEFAULT_ENABLED


def set_insecure_deterministic_enabled(value: bool | None) -> None:
    """
    Set in-memory override (testing only).

    Args:
        value: True/False to force the flag, or None to clear the override.
    """
    global _insecure_override
    if value is not None and not isinstance(value, bool):
        raise TypeError(f"value must be bool or None, got {type(value)}")
    _insecure_override = value
