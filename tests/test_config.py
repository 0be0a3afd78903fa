"""
Configuration Test Suite

Coverage: TOML loading, defaults, environment overrides, validation and the
GrantsDAO.from_config bridge.
"""

import os
import sys

import pytest

# ── Path setup ────────────────────────────────────────────────────────
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from grantsdao.clock import ManualClock
from grantsdao.config import GrantsDAOConfig, load_config
from grantsdao.constants import (
    DEFAULT_DAO_ADDRESS,
    PROPOSAL_EXPIRY_SECONDS,
    VOTING_DELAY_SECONDS,
)
from grantsdao.exceptions import ConfigurationError, InvalidConfig
from grantsdao.governance import GrantsDAO
from grantsdao.tokens import MockToken


# ══════════════════════════════════════════════════════════════════════
#  HELPERS
# ══════════════════════════════════════════════════════════════════════

TEAM = ["0x" + "0" * 38 + "a1", "0x" + "0" * 38 + "a2"]
COMMUNITY = ["0x" + "0" * 38 + "c1", "0x" + "0" * 38 + "c2", "0x" + "0" * 38 + "c3"]

ENV_VARS = (
    "GRANTSDAO_ADDRESS",
    "GRANTSDAO_TEAM_MEMBERS",
    "GRANTSDAO_COMMUNITY_MEMBERS",
    "GRANTSDAO_TO_PASS",
    "GRANTSDAO_VOTING_DELAY",
    "GRANTSDAO_PROPOSAL_EXPIRY",
    "GRANTSDAO_LOG_LEVEL",
)


def _toml_list(values):
    return "[" + ", ".join(f'"{v}"' for v in values) + "]"


def write_config(tmp_path, to_pass=4, extra=""):
    path = tmp_path / "config.toml"
    path.write_text(
        "[dao]\n"
        f"team_members = {_toml_list(TEAM)}\n"
        f"community_members = {_toml_list(COMMUNITY)}\n"
        f"to_pass = {to_pass}\n"
        "\n"
        "[timing]\n"
        "voting_delay = 60\n"
        "proposal_expiry = 600\n"
        "\n"
        "[logging]\n"
        'level = "debug"\n'
        + extra
    )
    return str(path)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# ══════════════════════════════════════════════════════════════════════
#  TESTS
# ══════════════════════════════════════════════════════════════════════


class TestConfigDefaults:

    def test_defaults(self):
        cfg = GrantsDAOConfig()
        assert cfg.dao.address == DEFAULT_DAO_ADDRESS
        assert cfg.dao.team_members == []
        assert cfg.timing.voting_delay == VOTING_DELAY_SECONDS
        assert cfg.timing.proposal_expiry == PROPOSAL_EXPIRY_SECONDS
        assert cfg.logging.level == "INFO"

    def test_token_is_not_a_config_key(self):
        assert "token" not in GrantsDAOConfig().to_dict()["dao"]

    def test_missing_file_uses_defaults(self, tmp_path):
        cfg = GrantsDAOConfig.from_file(str(tmp_path / "absent.toml"))
        assert cfg.dao.to_pass == 0
        assert cfg.timing.voting_delay == VOTING_DELAY_SECONDS


class TestConfigFile:

    def test_load(self, tmp_path):
        cfg = load_config(write_config(tmp_path))
        assert cfg.dao.team_members == TEAM
        assert cfg.dao.community_members == COMMUNITY
        assert cfg.dao.to_pass == 4
        assert cfg.timing.voting_delay == 60
        assert cfg.timing.proposal_expiry == 600
        assert cfg.logging.level == "DEBUG"

    def test_invalid_toml_raises(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[dao\nto_pass = ")
        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            load_config(str(path))

    def test_to_dict_round_trips(self, tmp_path):
        cfg = load_config(write_config(tmp_path))
        again = GrantsDAOConfig.from_dict(cfg.to_dict())
        assert again == cfg


class TestConfigEnvironment:

    def test_member_lists_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GRANTSDAO_COMMUNITY_MEMBERS", f"{COMMUNITY[0]}, {COMMUNITY[1]}")
        monkeypatch.setenv("GRANTSDAO_TO_PASS", "3")
        cfg = load_config(write_config(tmp_path))
        assert cfg.dao.community_members == COMMUNITY[:2]
        assert cfg.dao.to_pass == 3

    def test_timing_and_level_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GRANTSDAO_VOTING_DELAY", "10")
        monkeypatch.setenv("GRANTSDAO_PROPOSAL_EXPIRY", "20")
        monkeypatch.setenv("GRANTSDAO_LOG_LEVEL", "warning")
        cfg = load_config(write_config(tmp_path))
        assert cfg.timing.voting_delay == 10
        assert cfg.timing.proposal_expiry == 20
        assert cfg.logging.level == "WARNING"

    def test_non_integer_env_raises(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GRANTSDAO_TO_PASS", "four")
        with pytest.raises(ConfigurationError, match="GRANTSDAO_TO_PASS"):
            load_config(write_config(tmp_path))


class TestConfigValidation:

    def test_empty_voting_window_raises(self):
        cfg = GrantsDAOConfig()
        cfg.timing.proposal_expiry = cfg.timing.voting_delay
        with pytest.raises(ConfigurationError, match="proposal_expiry"):
            cfg.validate()

    def test_negative_delay_raises(self):
        cfg = GrantsDAOConfig()
        cfg.timing.voting_delay = -1
        with pytest.raises(ConfigurationError, match="voting_delay"):
            cfg.validate()

    def test_unknown_level_raises(self):
        cfg = GrantsDAOConfig()
        cfg.logging.level = "LOUD"
        with pytest.raises(ConfigurationError, match="logging.level"):
            cfg.validate()

    def test_non_integer_timing_raises(self):
        cfg = GrantsDAOConfig.from_dict({"dao": {"to_pass": 2}, "timing": {"voting_delay": "10"}})
        with pytest.raises(ConfigurationError, match="timing.voting_delay must be an integer"):
            cfg.validate()

    def test_boolean_expiry_raises(self):
        cfg = GrantsDAOConfig()
        cfg.timing.proposal_expiry = True
        with pytest.raises(ConfigurationError, match="timing.proposal_expiry"):
            cfg.validate()

    def test_string_timing_in_toml_raises(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[dao]\nto_pass = 2\n\n[timing]\nproposal_expiry = "600"\n')
        with pytest.raises(ConfigurationError, match="proposal_expiry"):
            load_config(str(path))

    def test_non_integer_to_pass_raises(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[dao]\nto_pass = "4"\n')
        with pytest.raises(ConfigurationError, match="to_pass"):
            load_config(str(path))


class TestFromConfig:

    def test_builds_dao(self, tmp_path):
        cfg = load_config(write_config(tmp_path))
        dao = GrantsDAO.from_config(cfg, MockToken("Test Token", "TST"), clock=ManualClock(0))
        assert dao.members() == 5
        assert dao.to_pass() == 4
        assert dao.to_dict()["votingDelay"] == 60
        assert dao.to_dict()["proposalExpiry"] == 600

    def test_membership_rules_apply(self, tmp_path):
        cfg = load_config(write_config(tmp_path, to_pass=3))
        with pytest.raises(InvalidConfig, match="Need higher value for toPass"):
            GrantsDAO.from_config(cfg, MockToken("Test Token", "TST"))
