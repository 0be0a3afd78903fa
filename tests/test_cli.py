"""
CLI Test Suite

Drives the ``grantsdao`` click commands through CliRunner against TOML
configurations written to a temporary directory.
"""

import json
import os
import sys

import pytest
from click.testing import CliRunner

# ── Path setup ────────────────────────────────────────────────────────
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from grantsdao import __version__
from grantsdao.cli import cli


# ══════════════════════════════════════════════════════════════════════
#  HELPERS
# ══════════════════════════════════════════════════════════════════════

TEAM = ["0x" + "0" * 38 + "a1", "0x" + "0" * 38 + "a2"]
COMMUNITY = ["0x" + "0" * 38 + "c1", "0x" + "0" * 38 + "c2", "0x" + "0" * 38 + "c3"]


def write_config(tmp_path, team=TEAM, community=COMMUNITY, to_pass=4):
    def toml_list(values):
        return "[" + ", ".join(f'"{v}"' for v in values) + "]"

    path = tmp_path / "config.toml"
    path.write_text(
        "[dao]\n"
        f"team_members = {toml_list(team)}\n"
        f"community_members = {toml_list(community)}\n"
        f"to_pass = {to_pass}\n"
        '\n[logging]\nlevel = "ERROR"\n'
    )
    return str(path)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("GRANTSDAO_TEAM_MEMBERS", "GRANTSDAO_COMMUNITY_MEMBERS",
                 "GRANTSDAO_TO_PASS", "GRANTSDAO_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


# ══════════════════════════════════════════════════════════════════════
#  TESTS
# ══════════════════════════════════════════════════════════════════════


class TestCLI:

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_show(self, tmp_path):
        result = CliRunner().invoke(cli, ["show", write_config(tmp_path)])
        assert result.exit_code == 0
        assert '"to_pass": 4' in result.output
        assert TEAM[0] in result.output

    def test_validate_ok(self, tmp_path):
        result = CliRunner().invoke(cli, ["validate", write_config(tmp_path)])
        assert result.exit_code == 0
        assert "OK: 2 team, 3 community, toPass=4" in result.output

    def test_validate_rejects_low_quorum(self, tmp_path):
        result = CliRunner().invoke(cli, ["validate", write_config(tmp_path, to_pass=3)])
        assert result.exit_code != 0
        assert "Need higher value for toPass" in result.output

    def test_validate_rejects_bad_toml(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[dao")
        result = CliRunner().invoke(cli, ["validate", str(path)])
        assert result.exit_code != 0
        assert "Invalid TOML" in result.output

    def test_validate_rejects_string_timing(self, tmp_path):
        path = write_config(tmp_path)
        with open(path, "a") as f:
            f.write('\n[timing]\nvoting_delay = "2 days"\n')
        result = CliRunner().invoke(cli, ["validate", path])
        assert result.exit_code != 0
        assert "timing.voting_delay must be an integer" in result.output


class TestSimulate:

    def test_executes_with_team_vote(self, tmp_path):
        result = CliRunner().invoke(cli, ["simulate", write_config(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "Proposal #1 executed: receiver balance=1, locked=0" in result.output

        events = [
            json.loads(line)["event"]
            for line in result.output.splitlines()
            if line.startswith('{"event"')
        ]
        assert events == [
            "NewProposal", "VoteProposal", "VoteProposal", "VoteProposal", "ExecuteProposal"
        ]

    def test_custom_receiver_and_amount(self, tmp_path):
        receiver = "0x" + "0" * 38 + "99"
        result = CliRunner().invoke(
            cli,
            ["simulate", write_config(tmp_path), "--fund", "10", "--amount", "7",
             "--receiver", receiver],
        )
        assert result.exit_code == 0, result.output
        assert "receiver balance=7, locked=0" in result.output

    def test_unfunded_treasury_fails(self, tmp_path):
        result = CliRunner().invoke(
            cli, ["simulate", write_config(tmp_path), "--fund", "0"]
        )
        assert result.exit_code != 0
        assert "Invalid funds on DAO" in result.output

    def test_team_only_dao(self, tmp_path):
        result = CliRunner().invoke(
            cli, ["simulate", write_config(tmp_path, community=[], to_pass=2)]
        )
        assert result.exit_code == 0, result.output
        assert "Proposal #1 executed" in result.output
