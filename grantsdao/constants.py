"""
GrantsDAO Constants

Governance timing, identities and revert reasons, plus the logging settings
read from ``.env`` at import time.
"""
from dotenv import dotenv_values


# ==================================================================================
# CONFIGURATION WRAPPERS
# ==================================================================================
class ConfigString(str):
    """A ``.env`` string that remembers its built-in default."""

    def __new__(cls, value, default):
        obj = super().__new__(cls, value)
        obj._default = default
        return obj

    def default(self):
        return self._default


class ConfigBool(int):
    """A ``.env`` flag that behaves as a bool and remembers its built-in default."""

    def __new__(cls, value, default):
        obj = super().__new__(cls, bool(value))
        obj._default = default
        return obj

    def default(self):
        return self._default

    def __eq__(self, other):
        return bool(self) == other

    def __hash__(self):
        return hash(bool(self))

    def __repr__(self):
        return repr(bool(self))

    __str__ = __repr__


def parse_bool(value):
    """``"true"``/``"false"`` in any casing become bools; anything else is returned as is."""
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return value


# ==================================================================================
# ENVIRONMENT (.env)
# ==================================================================================
_env = dotenv_values(".env")


def _env_string(key: str, default: str) -> ConfigString:
    raw = _env.get(key)
    return ConfigString(default if raw is None else raw, default)


def _env_flag(key: str, default: bool) -> ConfigBool:
    value = parse_bool(_env.get(key))
    return ConfigBool(default if not isinstance(value, bool) else value, default)


LOG_LEVEL = _env_string('LOG_LEVEL', 'INFO')
LOG_FORMAT = _env_string('LOG_FORMAT', '%(asctime)s - %(levelname)s - %(name)s - %(message)s')
LOG_DATE_FORMAT = _env_string('LOG_DATE_FORMAT', '%Y-%m-%dT%H:%M:%S')
LOG_CONSOLE_HIGHLIGHTING = _env_flag('LOG_CONSOLE_HIGHLIGHTING', True)
LOG_FILE_OUTPUT = _env_flag('LOG_FILE_OUTPUT', False)

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5

# ==================================================================================
# GOVERNANCE TIMING
# ==================================================================================
SECONDS_PER_DAY = 86400

# A proposal cannot be voted on until this long after creation (submission phase)
VOTING_DELAY_SECONDS = 2 * SECONDS_PER_DAY

# Voting closes this long after creation; afterwards the creator may delete it
PROPOSAL_EXPIRY_SECONDS = 9 * SECONDS_PER_DAY


# ==================================================================================
# IDENTITIES
# ==================================================================================
ZERO_ADDRESS = '0x' + '0' * 40

# Default address the DAO holds its treasury under when none is configured
DEFAULT_DAO_ADDRESS = '0x' + 'da0' * 13 + '0'


# ==================================================================================
# REVERT REASONS
# ==================================================================================
# These strings are surfaced verbatim to callers and indexers.
ERR_NEED_TEAM_MEMBER = 'Need at least one teamMember'
ERR_NEED_HIGHER_TO_PASS = 'Need higher value for toPass'
ERR_NOT_ENOUGH_MEMBERS = 'Not enough members to pass votes'
ERR_DUPLICATE_MEMBER = 'Duplicate member'
ERR_NOT_TEAM_MEMBER = 'Not team member'
ERR_NOT_PROPOSER = 'Not proposer'
ERR_AMOUNT_ZERO = 'Amount must be greater than 0'
ERR_AMOUNT_NOT_INTEGER = 'Amount must be an integer'
ERR_RECEIVER_ZERO = 'Receiver cannot be zero address'
ERR_MEMBER_ZERO = 'Member cannot be zero address'
ERR_ALREADY_MEMBER = 'Already a member'
ERR_INVALID_ADDRESS = 'Invalid address'
ERR_INVALID_FUNDS = 'Invalid funds on DAO'
ERR_UNABLE_TO_WITHDRAW = 'Unable to withdraw amount'
ERR_NOT_VOTING_PHASE = 'Proposal not in voting phase'
ERR_ALREADY_VOTED = 'Already voted'
ERR_NOT_EXPIRED = 'Proposal not expired'
ERR_TRANSFER_FAILED = 'Token transfer failed'
ERR_REENTRANT_CALL = 'Reentrant call'


