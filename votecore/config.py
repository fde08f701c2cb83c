'''Default governance settings and election parameter bounds.

The bounds are fixed by the protocol. The governance defaults can be
overridden through environment variables (or a ``.env`` file in the working
directory) when settings are loaded with :func:`load_settings`.
'''

import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv


BURN_PRINCIPAL = 'SP000000000000000000002Q6VF78'

HASH_SIZE = 32

MAX_NAME_LENGTH = 100
MAX_JURISDICTION_LENGTH = 100
MAX_OPTION_LENGTH = 50
OPTIONS_BOUNDS = (1, 10)
MAX_VOTERS_BOUNDS = (1, 1000)
QUORUM_BOUNDS = (0, 100)
THRESHOLD_BOUNDS = (1, 100)
ANONYMITY_LEVEL_BOUNDS = (0, 3)
REVEAL_PERIOD_BOUNDS = (0, 60)

DEFAULT_MAX_ELECTIONS = 500
DEFAULT_CREATION_FEE = 500

ENV_MAX_ELECTIONS = 'VOTECORE_MAX_ELECTIONS'
ENV_CREATION_FEE = 'VOTECORE_CREATION_FEE'


class Settings(NamedTuple):
    '''Initial governance settings of a voting system.

    Both values can later be changed by governance operations once an
    authority is configured.
    '''
    max_elections: int = DEFAULT_MAX_ELECTIONS
    creation_fee: int = DEFAULT_CREATION_FEE


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    '''Load settings, applying environment overrides to the defaults.

    :param dotenv_path: A ``.env`` file to read before the environment is
        consulted. If None, ``python-dotenv`` searches for one.
    :raises ValueError: If an override is not a valid integer.
    '''
    load_dotenv(dotenv_path)
    return Settings(
        max_elections=_int_from_env(ENV_MAX_ELECTIONS, DEFAULT_MAX_ELECTIONS),
        creation_fee=_int_from_env(ENV_CREATION_FEE, DEFAULT_CREATION_FEE),
    )


def _int_from_env(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f'invalid integer for {key}: {raw!r}') from e
