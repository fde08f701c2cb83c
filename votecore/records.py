'''State records of the election state machine.

All records are immutable named tuples; a state transition replaces a
record rather than mutating it in place. Identities (callers, creators,
voters, delegates) are plain strings.
'''

import enum
from typing import NamedTuple, Optional, Tuple


Principal = str


class ElectionKind(str, enum.Enum):
    public = 'public'
    private = 'private'
    dao = 'dao'


class Currency(str, enum.Enum):
    STX = 'STX'
    sBTC = 'sBTC'


class Election(NamedTuple):
    '''An election as stored in the registry.

    ``created_at`` anchors the voting and reveal windows and never changes;
    ``updated_at`` follows the last successful update.
    '''
    name: str
    max_voters: int
    options: Tuple[str, ...]
    duration: int
    quorum: int
    threshold: int
    created_at: int
    creator: Principal
    kind: ElectionKind
    anonymity_level: int
    reveal_period: int
    jurisdiction: str
    currency: Currency
    is_open: bool
    min_votes: int
    max_votes: int
    updated_at: int

    @property
    def voting_closes_at(self) -> int:
        '''Last height at which votes are accepted.'''
        return self.created_at + self.duration

    @property
    def reveal_closes_at(self) -> int:
        '''Last height at which votes can be revealed.'''
        return self.voting_closes_at + self.reveal_period


class ElectionUpdate(NamedTuple):
    name: str
    max_voters: int
    options: Tuple[str, ...]
    updated_at: int
    updater: Principal


class Voter(NamedTuple):
    voice_hash: bytes
    delegate: Optional[Principal] = None
    registered: bool = True


class Vote(NamedTuple):
    '''A committed ballot.

    ``option`` and ``salt`` stay None until the vote is revealed.
    '''
    commitment: bytes
    revealed: bool = False
    option: Optional[str] = None
    salt: Optional[bytes] = None
