"""ContextVar-based scan configuration for splicer.

Provides context-local defaults for Engine.apply using Python's ContextVars
(PEP 567). Options passed explicitly to ``apply`` win over the active config.

Thread Safety:
    ContextVars are thread-local. Each thread has independent storage,
    so no locks are needed.

Usage:
    from splicer.config import ScanConfig, scan_config_context

    with scan_config_context(ScanConfig(case_sensitive=True, label="env")):
        engine.apply(pattern, callback)

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ScanConfig:
    """Immutable scan configuration.

    Attributes:
        case_sensitive: Match literal tokens with exact letter case
        label: Name attached to trace events of a scan
        max_stalled_attempts: Consecutive abandoned attempts without forward
            progress tolerated before the scanner steps the cursor ahead

    """

    case_sensitive: bool = False
    label: str = ""
    max_stalled_attempts: int = 1

    def __post_init__(self) -> None:
        if self.max_stalled_attempts < 1:
            raise ValueError("max_stalled_attempts must be at least 1")

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ScanConfig":
        """Create ScanConfig from dictionary.

        Only includes keys that are valid ScanConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> ScanConfig.from_dict({"case_sensitive": True, "other": 1})
            ScanConfig(case_sensitive=True, label='', max_stalled_attempts=1)

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ScanConfig = ScanConfig()

_scan_config: ContextVar[ScanConfig] = ContextVar(
    "scan_config",
    default=_DEFAULT_CONFIG,
)


def get_scan_config() -> ScanConfig:
    """Get current scan configuration (context-local)."""
    return _scan_config.get()


def set_scan_config(config: ScanConfig) -> None:
    """Set scan configuration for current context.

    Args:
        config: ScanConfig instance to use for this context.

    """
    _scan_config.set(config)


def reset_scan_config() -> None:
    """Reset to default configuration."""
    _scan_config.set(_DEFAULT_CONFIG)


@contextmanager
def scan_config_context(config: ScanConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Args:
        config: ScanConfig to use within the context.

    """
    previous = _scan_config.get()
    _scan_config.set(config)
    try:
        yield
    finally:
        _scan_config.set(previous)


__all__ = [
    "ScanConfig",
    "get_scan_config",
    "set_scan_config",
    "reset_scan_config",
    "scan_config_context",
]
