'''The complete election state machine behind a single operation surface.

:class:`VotingSystem` owns the governance store, the voter directory, the
election registry, the ballot engine and the tally engine over one shared
state. Every mutating operation takes a :class:`votecore.context.CallContext`
as its first argument, performs all of its checks before writing anything,
and raises a :class:`votecore.errors.VotingError` subclass when rejected.
Lookups of unknown keys return None, zero or empty results.

To run operations as ledger transactions with tagged results, wrap the
system in a :class:`votecore.ledger.Ledger`.
'''

from typing import Dict, List, Optional, Sequence, Union

from votecore.ballot import BallotEngine
from votecore.config import Settings
from votecore.context import CallContext
from votecore.directory import VoterDirectory
from votecore.governance import GovernanceStore
from votecore.records import (
    Currency,
    Election,
    ElectionKind,
    ElectionUpdate,
    Principal,
    Vote,
    Voter,
)
from votecore.registry import ElectionRegistry
from votecore.tally import TallyEngine


class VotingSystem:
    '''Governance, registration, elections, ballots and tallies.

    :param settings: Initial governance settings. Defaults to
        :class:`votecore.config.Settings` defaults.
    '''
    MUTATING_OPERATIONS = (
        'set_authority', 'set_max_elections', 'set_creation_fee',
        'register', 'delegate', 'create', 'update',
        'submit_vote', 'reveal_vote',
    )

    def __init__(self, settings: Optional[Settings] = None):
        self.governance = GovernanceStore(settings)
        self.directory = VoterDirectory(self.governance)
        self.registry = ElectionRegistry(self.governance)
        self.tallies = TallyEngine()
        self.ballots = BallotEngine(
            self.registry, self.directory, self.tallies
        )

    # governance

    def set_authority(self, ctx: CallContext, principal: Principal) -> bool:
        return self.governance.set_authority(principal)

    def set_max_elections(self, ctx: CallContext, n: int) -> bool:
        return self.governance.set_max_elections(n)

    def set_creation_fee(self, ctx: CallContext, fee: int) -> bool:
        return self.governance.set_creation_fee(fee)

    # voters

    def register(self, ctx: CallContext, voice_hash: bytes) -> bool:
        return self.directory.register(ctx, voice_hash)

    def delegate(self, ctx: CallContext, to: Principal) -> bool:
        return self.directory.delegate(ctx, to)

    def is_registered(self, principal: Principal) -> bool:
        return self.directory.is_registered(principal)

    def get_voter(self, principal: Principal) -> Optional[Voter]:
        return self.directory.get(principal)

    # elections

    def create(self,
               ctx: CallContext,
               name: str,
               max_voters: int,
               options: Sequence[str],
               duration: int,
               quorum: int,
               threshold: int,
               kind: Union[str, ElectionKind],
               anonymity_level: int,
               reveal_period: int,
               jurisdiction: str,
               currency: Union[str, Currency],
               min_votes: int,
               max_votes: int,
               ) -> int:
        return self.registry.create(
            ctx, name, max_voters, options, duration, quorum, threshold,
            kind, anonymity_level, reveal_period, jurisdiction, currency,
            min_votes, max_votes,
        )

    def update(self,
               ctx: CallContext,
               election_id: int,
               name: str,
               max_voters: int,
               options: Sequence[str],
               ) -> bool:
        return self.registry.update(ctx, election_id, name, max_voters,
                                    options)

    def get_election(self, election_id: int) -> Optional[Election]:
        return self.registry.get(election_id)

    def get_election_by_name(self, name: str) -> Optional[Election]:
        return self.registry.get_by_name(name)

    def get_election_update(self, election_id: int
                            ) -> Optional[ElectionUpdate]:
        return self.registry.get_update(election_id)

    def count(self) -> int:
        return self.registry.count()

    def exists(self, name: str) -> bool:
        return self.registry.exists(name)

    # ballots

    def submit_vote(self,
                    ctx: CallContext,
                    election_id: int,
                    commitment: bytes,
                    ) -> bool:
        return self.ballots.submit_vote(ctx, election_id, commitment)

    def reveal_vote(self,
                    ctx: CallContext,
                    election_id: int,
                    option: str,
                    salt: bytes,
                    ) -> bool:
        return self.ballots.reveal_vote(ctx, election_id, option, salt)

    def get_vote(self, election_id: int, voter: Principal) -> Optional[Vote]:
        return self.ballots.get_vote(election_id, voter)

    def voted_elections(self, voter: Principal) -> List[int]:
        return self.ballots.voted_elections(voter)

    # tallies

    def get_tally(self, election_id: int, option: str) -> int:
        return self.tallies.tally(election_id, option)

    def get_tallies(self, election_id: int) -> Dict[str, int]:
        '''Return counts of all options of an election, in declared order.

        Unknown elections give an empty dictionary.
        '''
        election = self.registry.get(election_id)
        if election is None:
            return {}
        return self.tallies.tallies(election_id, election)

    def total_revealed(self, election_id: int) -> int:
        return self.tallies.total_revealed(election_id)

    def check_quorum(self,
                     election_id: int,
                     total_revealed: Optional[int] = None,
                     ) -> bool:
        '''Return whether enough votes were revealed to reach the quorum.

        :param total_revealed: Number of revealed votes to check. Defaults to
            the number revealed so far in the election.
        :raises ElectionNotFoundError: If there is no such election.
        '''
        election = self.registry.require(election_id)
        if total_revealed is None:
            total_revealed = self.tallies.total_revealed(election_id)
        return self.tallies.check_quorum(election, total_revealed)

    def compute_winner(self, election_id: int) -> Optional[str]:
        '''Return the first declared option reaching the threshold, if any.

        Unknown elections have no winner.
        '''
        election = self.registry.get(election_id)
        if election is None:
            return None
        return self.tallies.compute_winner(election_id, election)
