'''Commit-reveal ballot protocol.

A voter first submits a commitment, a SHA-256 hash binding them to an
option and a secret salt, while the election is open for voting. After
voting closes, during the reveal window, the voter discloses the option and
the salt; the ballot engine recomputes the commitment and, if it matches,
counts the vote.

The ballot of each voter in each election goes through the states
*no vote*, *committed* and *revealed*, never backwards. For an election
created at height ``c`` with duration ``d`` and reveal period ``r``:

-   votes are accepted at heights ``c`` to ``c + d`` inclusive,
-   reveals are accepted at heights ``c + d + 1`` to ``c + d + r``
    inclusive (so a reveal period of 0 means votes can never be revealed).

The canonical commitment is computed by :func:`make_commitment`; voters
must construct their commitments with the same encoding.
'''

import hashlib
import logging
from typing import Dict, List, Optional, Tuple

import votecore.config
from votecore.context import CallContext
from votecore.directory import VoterDirectory
from votecore.errors import (
    AlreadyRevealedError,
    AlreadyVotedError,
    InvalidCommitmentError,
    InvalidOptionError,
    RevealNotOpenError,
    VoteNotFoundError,
    VotingClosedError,
)
from votecore.records import Election, Principal, Vote
from votecore.registry import ElectionRegistry
from votecore.tally import TallyEngine


logger = logging.getLogger(__name__)


def make_commitment(option: str, salt: bytes) -> bytes:
    '''Compute the commitment to an option with a salt.

    The commitment is the SHA-256 digest of the UTF-8 encoded option label
    immediately followed by the raw salt bytes.
    '''
    return hashlib.sha256(option.encode('utf8') + bytes(salt)).digest()


def voting_window(election: Election) -> Tuple[int, int]:
    '''Return the first and last height at which votes are accepted.'''
    return election.created_at, election.voting_closes_at


def reveal_window(election: Election) -> Tuple[int, int]:
    '''Return the first and last height at which votes can be revealed.'''
    return election.voting_closes_at + 1, election.reveal_closes_at


def is_voting_open(election: Election, height: int) -> bool:
    start, end = voting_window(election)
    return election.is_open and start <= height <= end


def is_reveal_open(election: Election, height: int) -> bool:
    start, end = reveal_window(election)
    return start <= height <= end


class BallotEngine:
    '''Accepts committed votes and verifies their reveals.

    :param registry: Elections to vote in.
    :param directory: Registered voters.
    :param tallies: Counters to update on successful reveals.
    '''
    def __init__(self,
                 registry: ElectionRegistry,
                 directory: VoterDirectory,
                 tallies: TallyEngine,
                 ):
        self.registry = registry
        self.directory = directory
        self.tallies = tallies
        self.votes: Dict[Tuple[int, Principal], Vote] = {}
        self.voted: Dict[Principal, List[int]] = {}

    def get_vote(self, election_id: int, voter: Principal) -> Optional[Vote]:
        return self.votes.get((election_id, voter))

    def voted_elections(self, voter: Principal) -> List[int]:
        '''Return ids of elections the voter has submitted a vote in.'''
        return list(self.voted.get(voter, []))

    def submit_vote(self,
                    ctx: CallContext,
                    election_id: int,
                    commitment: bytes,
                    ) -> bool:
        '''Submit the caller's committed vote.

        :raises NotRegisteredError: If the caller is not a registered voter.
        :raises ElectionNotFoundError: If there is no such election.
        :raises VotingClosedError: If the election is closed or the height
            is outside its voting window.
        :raises AlreadyVotedError: If the caller has voted in the election.
        :raises InvalidCommitmentError: If the commitment is not a 32-byte
            hash.
        '''
        self.directory.require_registered(ctx.caller)
        election = self.registry.require(election_id)
        if not is_voting_open(election, ctx.height):
            raise VotingClosedError
        voted = self.voted.get(ctx.caller, [])
        if election_id in voted:
            raise AlreadyVotedError
        if (not isinstance(commitment, bytes)
                or len(commitment) != votecore.config.HASH_SIZE):
            raise InvalidCommitmentError
        self.votes[election_id, ctx.caller] = Vote(commitment=commitment)
        self.voted[ctx.caller] = voted + [election_id]
        logger.info('vote committed in election %d by %s at height %d',
                    election_id, ctx.caller, ctx.height)
        return True

    def reveal_vote(self,
                    ctx: CallContext,
                    election_id: int,
                    option: str,
                    salt: bytes,
                    ) -> bool:
        '''Reveal the caller's vote and count it.

        :raises ElectionNotFoundError: If there is no such election.
        :raises VoteNotFoundError: If the caller did not vote in it.
        :raises AlreadyRevealedError: If the vote was revealed before.
        :raises InvalidCommitmentError: If the option and salt do not hash to
            the committed value.
        :raises InvalidOptionError: If the option is not offered.
        :raises RevealNotOpenError: If the height is outside the reveal
            window.
        '''
        election = self.registry.require(election_id)
        vote = self.votes.get((election_id, ctx.caller))
        if vote is None:
            raise VoteNotFoundError
        if vote.revealed:
            raise AlreadyRevealedError
        if make_commitment(option, salt) != vote.commitment:
            raise InvalidCommitmentError
        if option not in election.options:
            raise InvalidOptionError(option)
        if not is_reveal_open(election, ctx.height):
            raise RevealNotOpenError
        self.votes[election_id, ctx.caller] = vote._replace(
            revealed=True,
            option=option,
            salt=bytes(salt),
        )
        self.tallies.increment(election_id, option)
        logger.info('vote revealed in election %d by %s at height %d',
                    election_id, ctx.caller, ctx.height)
        return True
