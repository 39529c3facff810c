"""
Run configuration: master server credentials and purge-date run parameters.

Credentials come from a three-line host info file:

    https://master.example.com:4285
    username
    password

or, when that file is absent, from C42_URL / C42_USERNAME / C42_PASSWORD
(optionally loaded from a .env file).
"""

import os
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from coldstore.errors import ConfigError

# =============================================================================
# CONFIGURATION
# =============================================================================

PACKAGE_DIR = Path(__file__).parent
PROJECT_ROOT = PACKAGE_DIR.parent

DEFAULT_HOST_INFO_FILE = "hostinfo.config"

TODAY = "TODAY"
BASELINE_DATE_FORMATS = ("%m-%d-%Y", "%Y-%m-%d")

# =============================================================================
# CREDENTIAL LOADING
# =============================================================================


@dataclass(frozen=True)
class HostInfo:
    url: str
    username: str
    password: str


def load_env():
    """Load environment variables from .env file."""
    env_paths = [
        PROJECT_ROOT / ".env",
        Path.cwd() / ".env",
    ]
    for env_path in env_paths:
        if env_path.exists():
            load_dotenv(env_path)
            return True
    return False


def load_host_info(path) -> HostInfo:
    """Read URL, username and password from the first three lines of a file."""
    path = Path(path)
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        raise ConfigError(f"Can't read {path}: {e}") from e

    values = [line.strip() for line in lines[:3]]
    if len(values) < 3 or not all(values):
        raise ConfigError(f"Info is missing from the config file. Check {path}.")

    url, username, password = values
    return HostInfo(url=url.rstrip("/"), username=username, password=password)


def host_info_from_env() -> Optional[HostInfo]:
    url = os.getenv("C42_URL")
    username = os.getenv("C42_USERNAME")
    password = os.getenv("C42_PASSWORD")
    if not (url and username and password):
        return None
    return HostInfo(url=url.strip().rstrip("/"), username=username.strip(), password=password.strip())


def resolve_host_info(path=DEFAULT_HOST_INFO_FILE) -> HostInfo:
    """Prefer the host info file; fall back to the environment."""
    path = Path(path)
    if path.exists():
        return load_host_info(path)

    load_env()
    host_info = host_info_from_env()
    if host_info is None:
        raise ConfigError(
            f"Can't read {path} and C42_URL, C42_USERNAME, C42_PASSWORD are not all set."
        )
    return host_info


# =============================================================================
# RUN PARAMETERS
# =============================================================================


def parse_baseline_date(value: str, today: Optional[date] = None) -> date:
    """Parse MM-DD-YYYY, YYYY-MM-DD or TODAY (the current UTC date)."""
    value = (value or "").strip()
    if value.upper() == TODAY:
        return today if today is not None else datetime.now(timezone.utc).date()

    for fmt in BASELINE_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ConfigError(f"Date argument not formatted correctly: {value!r} (expected MM-DD-YYYY or TODAY)")


@dataclass(frozen=True)
class RunParameters:
    """Immutable settings for one purge-date run."""

    baseline_date: date
    offset_days: int = 0
    dry_run: bool = False
    select_all: bool = False
    skip_zero_cold_bytes: bool = False
    item_limit: Optional[int] = None

    def __post_init__(self):
        if self.offset_days < 0:
            raise ConfigError(
                f"The days later parameter is not valid: {self.offset_days}. "
                "Must be greater than or equal to zero."
            )
        if self.item_limit is not None and self.item_limit < 0:
            raise ConfigError(f"Item limit must be non-negative, got {self.item_limit}.")
        object.__setattr__(self, "_target_expiration", self.baseline_date + timedelta(days=self.offset_days))

    @property
    def target_expiration(self) -> date:
        return self._target_expiration
