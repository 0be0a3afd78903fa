"""
GrantsDAO Configuration

Loads a DAO deployment from config.toml. Environment variables override
TOML values.
"""

from .loader import (
    DAOSectionConfig,
    GrantsDAOConfig,
    LoggingConfig,
    TimingConfig,
    load_config,
)

__all__ = [
    "DAOSectionConfig",
    "GrantsDAOConfig",
    "LoggingConfig",
    "TimingConfig",
    "load_config",
]
