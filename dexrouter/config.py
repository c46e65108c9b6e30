"""Router configuration."""

import os
from dataclasses import dataclass

from dexrouter.constants import MIN_PATH_LENGTH


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


def _env_optional_int(name: str) -> int | None:
    raw = os.environ.get(name, "").strip()
    return int(raw) if raw else None


@dataclass(frozen=True)
class RouterConfig:
    """Behavior settings for the router.

    Attributes:
        max_path_length: Longest accepted swap path, in tokens. None (default)
            accepts paths of any length.
        abort_on_zero_hop: If True, a hop whose projected return is 0 aborts
            the swap with InsufficientOutputAmount right away. If False (default),
            the hop is skipped, 0 is carried forward, and the path-boundary
            slippage check rejects the call.
        log_format: "console" or "json" renderer for configure_logging
        log_level: Minimum log level name for configure_logging
    """

    max_path_length: int | None = None
    abort_on_zero_hop: bool = False
    log_format: str = "console"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.max_path_length is not None and self.max_path_length < MIN_PATH_LENGTH:
            raise ValueError(
                f"max_path_length must be at least {MIN_PATH_LENGTH}, got {self.max_path_length}"
            )
        if self.log_format not in ("console", "json"):
            raise ValueError(f"Unknown log_format: {self.log_format}")

    @classmethod
    def from_env(cls) -> "RouterConfig":
        """Build a config from ROUTER_* environment variables.

        - ROUTER_MAX_PATH_LENGTH: longest accepted path (default: unset, no cap)
        - ROUTER_ABORT_ON_ZERO_HOP: abort at the first zero-return hop (default: false)
        - ROUTER_LOG_FORMAT: console or json (default: console)
        - ROUTER_LOG_LEVEL: log level name (default: INFO)
        """
        return cls(
            max_path_length=_env_optional_int("ROUTER_MAX_PATH_LENGTH"),
            abort_on_zero_hop=_env_flag("ROUTER_ABORT_ON_ZERO_HOP"),
            log_format=os.environ.get("ROUTER_LOG_FORMAT", "console").lower(),
            log_level=os.environ.get("ROUTER_LOG_LEVEL", "INFO").upper(),
        )


# Default configuration instance
DEFAULT_ROUTER_CONFIG = RouterConfig()
