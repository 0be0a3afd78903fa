"""
GrantsDAO TOML Configuration Loader

Loads a DAO deployment description from a TOML file with environment
variable overrides (dataclass + from_dict + from_file + apply_env).

Example config.toml:

    [dao]
    address = "0x..."
    team_members = ["0x...", "0x..."]
    community_members = ["0x...", "0x...", "0x..."]
    to_pass = 4

    [timing]
    voting_delay = 172800
    proposal_expiry = 777600

    [logging]
    level = "INFO"

Environment variable mapping:
    [dao] address           → GRANTSDAO_ADDRESS
    [dao] team_members      → GRANTSDAO_TEAM_MEMBERS (comma separated)
    [dao] community_members → GRANTSDAO_COMMUNITY_MEMBERS (comma separated)
    [dao] to_pass           → GRANTSDAO_TO_PASS
    [timing] voting_delay   → GRANTSDAO_VOTING_DELAY
    [timing] proposal_expiry→ GRANTSDAO_PROPOSAL_EXPIRY
    [logging] level         → GRANTSDAO_LOG_LEVEL
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    import tomli  # type: ignore[no-redef]

from ..constants import DEFAULT_DAO_ADDRESS, PROPOSAL_EXPIRY_SECONDS, VOTING_DELAY_SECONDS
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _split_list(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def _int_env(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


@dataclass
class DAOSectionConfig:
    """[dao] section."""
    address: str = DEFAULT_DAO_ADDRESS
    team_members: List[str] = field(default_factory=list)
    community_members: List[str] = field(default_factory=list)
    to_pass: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DAOSectionConfig":
        return cls(
            address=data.get("address", DEFAULT_DAO_ADDRESS),
            team_members=list(data.get("team_members", [])),
            community_members=list(data.get("community_members", [])),
            to_pass=data.get("to_pass", 0),
        )

    def apply_env(self) -> None:
        """Override from environment variables."""
        if v := os.environ.get("GRANTSDAO_ADDRESS"):
            self.address = v
        if v := os.environ.get("GRANTSDAO_TEAM_MEMBERS"):
            self.team_members = _split_list(v)
        if v := os.environ.get("GRANTSDAO_COMMUNITY_MEMBERS"):
            self.community_members = _split_list(v)
        if v := os.environ.get("GRANTSDAO_TO_PASS"):
            self.to_pass = _int_env("GRANTSDAO_TO_PASS", v)


@dataclass
class TimingConfig:
    """[timing] section, in seconds."""
    voting_delay: int = VOTING_DELAY_SECONDS
    proposal_expiry: int = PROPOSAL_EXPIRY_SECONDS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimingConfig":
        return cls(
            voting_delay=data.get("voting_delay", VOTING_DELAY_SECONDS),
            proposal_expiry=data.get("proposal_expiry", PROPOSAL_EXPIRY_SECONDS),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("GRANTSDAO_VOTING_DELAY"):
            self.voting_delay = _int_env("GRANTSDAO_VOTING_DELAY", v)
        if v := os.environ.get("GRANTSDAO_PROPOSAL_EXPIRY"):
            self.proposal_expiry = _int_env("GRANTSDAO_PROPOSAL_EXPIRY", v)


@dataclass
class LoggingConfig:
    """[logging] section."""
    level: str = "INFO"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingConfig":
        return cls(level=str(data.get("level", "INFO")).upper())

    def apply_env(self) -> None:
        if v := os.environ.get("GRANTSDAO_LOG_LEVEL"):
            self.level = v.upper()


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


@dataclass
class GrantsDAOConfig:
    """Complete DAO deployment configuration."""
    dao: DAOSectionConfig = field(default_factory=DAOSectionConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GrantsDAOConfig":
        return cls(
            dao=DAOSectionConfig.from_dict(data.get("dao", {})),
            timing=TimingConfig.from_dict(data.get("timing", {})),
            logging=LoggingConfig.from_dict(data.get("logging", {})),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "GrantsDAOConfig":
        """
        Load configuration from a TOML file.

        A missing file yields the defaults (plus environment overrides).
        Raises ConfigurationError if the file is not valid TOML.
        """
        path = Path(config_path)
        if not path.exists():
            logger.warning("Config file not found: %s, using defaults", config_path)
            cfg = cls()
            cfg.apply_env()
            return cfg

        with open(path, "rb") as f:
            try:
                raw = tomli.load(f)
            except tomli.TOMLDecodeError as e:
                raise ConfigurationError(f"Invalid TOML in {config_path}: {e}") from e

        cfg = cls.from_dict(raw)
        cfg.apply_env()
        return cfg

    def apply_env(self) -> None:
        """Apply environment variable overrides to all sections."""
        self.dao.apply_env()
        self.timing.apply_env()
        self.logging.apply_env()

    def validate(self) -> bool:
        """
        Check value shapes. Membership and quorum rules are enforced by the
        DAO itself at construction.

        Raises:
            ConfigurationError: on invalid config
        """
        for name, value in (
            ("dao.to_pass", self.dao.to_pass),
            ("timing.voting_delay", self.timing.voting_delay),
            ("timing.proposal_expiry", self.timing.proposal_expiry),
        ):
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        if self.timing.voting_delay < 0:
            raise ConfigurationError("timing.voting_delay must be >= 0")
        if self.timing.proposal_expiry <= self.timing.voting_delay:
            raise ConfigurationError("timing.proposal_expiry must be greater than voting_delay")
        if self.logging.level not in _LOG_LEVELS:
            raise ConfigurationError(f"Invalid logging.level: {self.logging.level}")
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dao": {
                "address": self.dao.address,
                "team_members": list(self.dao.team_members),
                "community_members": list(self.dao.community_members),
                "to_pass": self.dao.to_pass,
            },
            "timing": {
                "voting_delay": self.timing.voting_delay,
                "proposal_expiry": self.timing.proposal_expiry,
            },
            "logging": {"level": self.logging.level},
        }


def load_config(config_path: str) -> GrantsDAOConfig:
    """Load, apply env overrides and validate."""
    cfg = GrantsDAOConfig.from_file(config_path)
    cfg.validate()
    return cfg
