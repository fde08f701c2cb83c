'''Vote counting, quorum checks and winner selection.

Counts are only ever incremented, by one, when a ballot is revealed. The
winner of an election is the first option in declaration order whose count
reaches the election threshold (taken as an absolute number of votes). This
is not a most-votes rule: with options ``A, B``, threshold 1 and counts
``A: 1, B: 2``, the winner is ``A``.

Quorum is only reported, never enforced: :meth:`TallyEngine.check_quorum`
and :meth:`TallyEngine.require_quorum` are to be called by whoever gates an
action on a valid turnout.
'''

import logging
from typing import Dict, Optional

from votecore.errors import QuorumNotMetError
from votecore.records import Election


logger = logging.getLogger(__name__)


def quorum_size(election: Election) -> int:
    '''Number of revealed votes needed to satisfy the quorum.'''
    return election.max_voters * election.quorum // 100


class TallyEngine:
    '''Per-election, per-option vote counters.'''
    def __init__(self):
        self.counts: Dict[int, Dict[str, int]] = {}

    def increment(self, election_id: int, option: str) -> int:
        '''Add one vote for the option and return the new count.'''
        counts = self.counts.setdefault(election_id, {})
        counts[option] = counts.get(option, 0) + 1
        logger.debug('election %d: %r now has %d votes',
                     election_id, option, counts[option])
        return counts[option]

    def tally(self, election_id: int, option: str) -> int:
        return self.counts.get(election_id, {}).get(option, 0)

    def tallies(self, election_id: int, election: Election) -> Dict[str, int]:
        '''Return the counts of all declared options in declaration order.'''
        return {
            option: self.tally(election_id, option)
            for option in election.options
        }

    def total_revealed(self, election_id: int) -> int:
        return sum(self.counts.get(election_id, {}).values())

    def check_quorum(self, election: Election, total_revealed: int) -> bool:
        return total_revealed >= quorum_size(election)

    def require_quorum(self, election: Election, total_revealed: int) -> None:
        '''Check the quorum.

        :raises QuorumNotMetError: If too few votes were revealed.
        '''
        if not self.check_quorum(election, total_revealed):
            raise QuorumNotMetError(total_revealed, quorum_size(election))

    def compute_winner(self,
                       election_id: int,
                       election: Election,
                       ) -> Optional[str]:
        '''Return the first declared option reaching the threshold.

        :returns: The winning option label, or None if no option reaches
            the threshold.
        '''
        for option in election.options:
            if self.tally(election_id, option) >= election.threshold:
                return option
        return None
