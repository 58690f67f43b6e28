"""Configuration management for notifymcp."""

import os
import sys
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

COMPATIBILITY_MODES = ("canonical", "strict")


def get_config_path() -> Path:
    """Get the path to the notifymcp config file.

    NOTIFYMCP_CONFIG overrides the default XDG location.
    """
    override = os.environ.get("NOTIFYMCP_CONFIG")
    if override:
        return Path(override).expanduser()
    xdg_config = Path.home() / ".config"
    return xdg_config / "notifymcp" / "config.toml"


def get_default_config() -> str:
    """Return the default config file contents."""
    return """\
# notifymcp configuration

[notifier]
# terminal-notifier compatible binary (alerter works too)
binary = "terminal-notifier"
# seconds, used when a caller passes no timeout
default_timeout = 10
# optional bundle id to post as, e.g. "com.apple.Terminal"
# sender = "com.apple.Terminal"

[server]
# "canonical": delivery failures come back as advisory text
# "strict": message is required and delivery failures are protocol errors
compatibility = "canonical"

[log]
level = "INFO"
"""


@dataclass
class NotifierConfig:
    """Configuration for the native notifier binary."""

    binary: str = "terminal-notifier"
    default_timeout: int = 10
    sender: str | None = None


@dataclass
class ServerConfig:
    """Configuration for the MCP server surface."""

    name: str = "Notifications"
    version: str = "0.1.0"
    compatibility: str = "canonical"  # "canonical" or "strict"

    @property
    def strict(self) -> bool:
        return self.compatibility == "strict"


@dataclass
class LogConfig:
    level: str = "INFO"


@dataclass
class Config:
    """notifymcp configuration."""

    notifier: NotifierConfig = field(default_factory=NotifierConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log: LogConfig = field(default_factory=LogConfig)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file, or return defaults."""
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return Config()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        # stdout belongs to the protocol stream, so warn on stderr
        print(f"Warning: Could not load config from {config_path}: {e}", file=sys.stderr)
        return Config()

    return _parse_config(data)


def _parse_config(data: dict[str, Any]) -> Config:
    """Parse config dict into Config object."""
    notifier_data = data.get("notifier", {})
    notifier = NotifierConfig(
        binary=notifier_data.get("binary", "terminal-notifier"),
        default_timeout=int(notifier_data.get("default_timeout", 10)),
        sender=notifier_data.get("sender") or None,
    )

    server_data = data.get("server", {})
    compatibility = server_data.get("compatibility", "canonical")
    if compatibility not in COMPATIBILITY_MODES:
        print(
            f"Warning: unknown compatibility mode {compatibility!r}, using 'canonical'",
            file=sys.stderr,
        )
        compatibility = "canonical"
    # Use dataclass defaults for name/version if unspecified
    defaults = ServerConfig()
    server = ServerConfig(
        name=server_data.get("name", defaults.name),
        version=server_data.get("version", defaults.version),
        compatibility=compatibility,
    )

    log_data = data.get("log", {})
    log = LogConfig(level=log_data.get("level", "INFO"))

    return Config(notifier=notifier, server=server, log=log)


def ensure_config_exists() -> Path:
    """Ensure the config file exists, creating with defaults if needed."""
    config_path = get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(get_default_config())

    return config_path
