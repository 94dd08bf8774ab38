"""Run configuration for procwrap."""

import os
import re
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import DEFAULT_LOG_DIR, DEFAULT_TEMP_DIR, NAME_FILLER


class ConfigError(Exception):
    """Invalid or missing command-line input."""


class DirectoryPermissionError(Exception):
    """Log or temp directory cannot be created or written."""


_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")


def sanitize_name(raw: str) -> str:
    """Convert a task name to a filesystem-safe identifier.

    Args:
        raw: Name as supplied by the user

    Returns:
        Name with every non-alphanumeric character replaced by the filler

    Raises:
        ConfigError: If the name contains no alphanumeric characters
    """
    name = _UNSAFE_CHARS.sub(NAME_FILLER, raw)
    if not name.strip(NAME_FILLER):
        raise ConfigError(f"Invalid name: {raw!r}")
    return name


def lock_path(temp_dir: Path, name: str) -> Path:
    """Get path to the lock file for a task."""
    return temp_dir / f"{name}.pid"


def log_path(log_dir: Path, name: str) -> Path:
    """Get path to the log file for a task."""
    return log_dir / f"{name}.log"


class ConfigDefaults(BaseModel):
    """Defaults loaded from a TOML file's ``[defaults]`` table."""

    log_dir: Path = Path(DEFAULT_LOG_DIR)
    temp_dir: Path = Path(DEFAULT_TEMP_DIR)
    timeout: int = Field(default=0, ge=0, description="Default timeout, 0 is unbounded")

    @field_validator("log_dir", "temp_dir", mode="before")
    @classmethod
    def dir_not_blank(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            raise ValueError("directory must not be empty")
        return value


class RunConfig(BaseModel):
    """Immutable settings for one supervised invocation."""

    model_config = ConfigDict(frozen=True)

    command: str
    name: str
    active: bool = False
    timeout: int = Field(default=0, ge=0, description="Seconds, 0 is unbounded")
    log_dir: Path = Path(DEFAULT_LOG_DIR)
    temp_dir: Path = Path(DEFAULT_TEMP_DIR)
    debug: bool = False

    @field_validator("command")
    @classmethod
    def command_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("command must not be empty")
        return value

    @field_validator("name")
    @classmethod
    def name_is_sanitized(cls, value: str) -> str:
        try:
            return sanitize_name(value)
        except ConfigError as e:
            raise ValueError(str(e)) from None

    @property
    def lock_file(self) -> Path:
        return lock_path(self.temp_dir, self.name)

    @property
    def log_file(self) -> Path:
        return log_path(self.log_dir, self.name)


def load_defaults(config_path: Path | None) -> ConfigDefaults:
    """Load defaults from a TOML config file.

    Args:
        config_path: Path to the TOML file, or None

    Returns:
        Loaded defaults, or built-in defaults if no file is given or it doesn't exist

    Raises:
        ConfigError: If the file is not valid TOML or has invalid values
    """
    if config_path is None or not config_path.exists():
        return ConfigDefaults()
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        return ConfigDefaults.model_validate(data.get("defaults", {}))
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        raise ConfigError(f"Invalid config file {config_path}: {e}") from e


def build_config(
    command: str | None,
    name: str | None,
    active: bool = False,
    timeout: int | None = None,
    log_dir: str | Path | None = None,
    temp_dir: str | Path | None = None,
    debug: bool = False,
    defaults: ConfigDefaults | None = None,
) -> RunConfig:
    """Validate command-line input into a RunConfig.

    Explicit values take precedence over ``defaults``. An explicit timeout
    must be positive; only the default may be 0 (unbounded). Explicit
    directories must not be empty.

    Raises:
        ConfigError: If required values are missing or invalid
    """
    defaults = defaults or ConfigDefaults()
    if not command:
        raise ConfigError("Missing required option: --command")
    if not name:
        raise ConfigError("Missing required option: --name")
    if timeout is not None and timeout <= 0:
        raise ConfigError(f"Timeout must be a positive integer, got {timeout}")
    for option, value in (("--logdir", log_dir), ("--tempdir", temp_dir)):
        if value is not None and not str(value).strip():
            raise ConfigError(f"Directory for {option} must not be empty")

    try:
        return RunConfig(
            command=command,
            name=name,
            active=active,
            timeout=defaults.timeout if timeout is None else timeout,
            log_dir=defaults.log_dir if log_dir is None else Path(log_dir),
            temp_dir=defaults.temp_dir if temp_dir is None else Path(temp_dir),
            debug=debug,
        )
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        raise ConfigError(messages) from e


def _current_user() -> str:
    return os.environ.get("USER") or str(os.getuid())


def _nearest_existing(path: Path) -> Path:
    """Walk up from path to the first component that exists."""
    candidate = path.absolute()
    while not candidate.exists() and candidate.parent != candidate:
        candidate = candidate.parent
    return candidate


def _check_writable_dir(path: Path) -> None:
    base = _nearest_existing(path)
    if not base.is_dir():
        raise DirectoryPermissionError(
            f"{_current_user()} cannot create: {path} ({base} is not a directory)"
        )
    if not os.access(base, os.W_OK | os.X_OK):
        raise DirectoryPermissionError(f"{_current_user()} lacks write permissions to: {base}")


def ensure_directories(config: RunConfig) -> None:
    """Create the log and temp directories if needed and check they are writable.

    Both directories are checked before either is created, so a failure
    leaves nothing behind.

    Raises:
        DirectoryPermissionError: If either directory is unusable
    """
    _check_writable_dir(config.log_dir)
    _check_writable_dir(config.temp_dir)
    for path in (config.log_dir, config.temp_dir):
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryPermissionError(f"{_current_user()} cannot create: {path} ({e})") from e
