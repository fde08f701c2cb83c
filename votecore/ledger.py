'''An in-process ledger runtime for the voting system.

The voting system expects its host ledger to authenticate callers, to keep a
monotonically non-decreasing logical clock (the height), to move native
currency, and to execute every operation as an all-or-nothing transaction
in one global order. :class:`Ledger` provides all of that in memory, which
makes it suitable for simulations, tests and command line tooling. Every
call copies the state containers to be able to roll back, so it is not
meant to host large production states.

Operations are run with :meth:`Ledger.call`, which never raises for a
rejected operation but returns a tagged :class:`Result`::

    ledger = Ledger()
    ledger.call('ST1AUTH', 'set_authority', 'ST1AUTH')
    result = ledger.call('ST1VOTER', 'register', voice_hash)
    if not result.ok:
        print('rejected with code', result.value)

Currency transfers requested during an operation are buffered and applied
only if the operation succeeds. The optional event sink receives an
:class:`Event` after every successful operation.
'''

import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from votecore.config import Settings, load_settings
from votecore.context import CallContext
from votecore.errors import VotingError
from votecore.records import Principal
from votecore.system import VotingSystem


logger = logging.getLogger(__name__)


class Transfer(NamedTuple):
    amount: int
    sender: Principal
    recipient: Principal


class Event(NamedTuple):
    '''Audit record of a successful operation.'''
    operation: str
    caller: Principal
    height: int


class Result(NamedTuple):
    '''Outcome of an operation run as a ledger transaction.

    :param ok: Whether the operation succeeded.
    :param value: The operation's return value on success, the error code
        on failure.
    :param error: The error that rejected the operation, if any.
    '''
    ok: bool
    value: Any
    error: Optional[VotingError] = None

    def unwrap(self) -> Any:
        '''Return the value of a successful result.

        :raises VotingError: The stored error of a failed result.
        '''
        if not self.ok:
            raise self.error
        return self.value


EventSink = Callable[[Event], None]


class Ledger:
    '''Executes voting system operations as atomic ledger transactions.

    :param system: The voting system to operate. A new one is created if
        not given.
    :param settings: Governance settings for a newly created system. If
        not given, they are read by :func:`votecore.config.load_settings`
        from the environment.
    :param balances: Initial native currency balances. If given, transfers
        exceeding the sender's balance fail; if None, balances are not
        tracked and every transfer succeeds.
    :param event_sink: Callable receiving an :class:`Event` for every
        successful operation.
    '''
    def __init__(self,
                 system: Optional[VotingSystem] = None,
                 settings: Optional[Settings] = None,
                 balances: Optional[Dict[Principal, int]] = None,
                 event_sink: Optional[EventSink] = None,
                 ):
        if system is None:
            if settings is None:
                settings = load_settings()
            system = VotingSystem(settings)
        self.system = system
        self.height = 0
        self.balances = None if balances is None else dict(balances)
        self.transfers: List[Transfer] = []
        self.event_sink = event_sink
        self._pending: List[Transfer] = []
        self._running = False

    def advance(self, n_blocks: int = 1) -> int:
        '''Move the clock forward and return the new height.'''
        return self.set_height(self.height + n_blocks)

    def set_height(self, height: int) -> int:
        if height < self.height:
            raise ValueError(
                f'ledger height cannot decrease: {height} < {self.height}'
            )
        self.height = height
        return height

    def balance(self, principal: Principal) -> Optional[int]:
        if self.balances is None:
            return None
        return self.balances.get(principal, 0)

    def _transfer(self,
                  amount: int,
                  sender: Principal,
                  recipient: Principal,
                  ) -> bool:
        '''Request a transfer within the running operation.

        The transfer only takes effect when the operation succeeds.

        :raises RuntimeError: If no operation is running.
        '''
        if not self._running:
            raise RuntimeError('transfers are only possible within a call')
        if amount < 0:
            return False
        if self.balances is not None:
            committed = sum(
                t.amount for t in self._pending if t.sender == sender
            )
            if self.balance(sender) - committed < amount:
                logger.debug('insufficient balance of %s for transfer of %d',
                             sender, amount)
                return False
        self._pending.append(Transfer(amount, sender, recipient))
        return True

    def context(self, caller: Principal) -> CallContext:
        return CallContext(
            caller=caller, height=self.height, transfer=self._transfer
        )

    def call(self, caller: Principal, operation: str, *args, **kwargs
             ) -> Result:
        '''Run a mutating operation of the voting system as a transaction.

        An event sink failure is logged and does not change the result, since
        the operation is already committed when the sink is notified.

        :param caller: Authenticated identity of the caller.
        :param operation: Name of a :class:`VotingSystem` mutating method.
        :raises ValueError: If the operation is not a mutating operation of
            the voting system.
        '''
        if operation not in VotingSystem.MUTATING_OPERATIONS:
            raise ValueError(f'unknown operation: {operation!r}')
        snapshot = self._snapshot()
        self._pending = []
        self._running = True
        try:
            value = getattr(self.system, operation)(
                self.context(caller), *args, **kwargs
            )
        except VotingError as err:
            self._rollback(snapshot)
            logger.debug('%s by %s at height %d rejected: %s (%d)',
                         operation, caller, self.height, err, err.code)
            return Result(ok=False, value=err.code, error=err)
        except Exception:
            self._rollback(snapshot)
            raise
        finally:
            self._running = False
        self._commit_transfers()
        if self.event_sink is not None:
            try:
                self.event_sink(Event(operation, caller, self.height))
            except Exception:
                logger.exception('event sink failed for %s by %s',
                                 operation, caller)
        return Result(ok=True, value=value)

    def _snapshot(self) -> Dict[str, Any]:
        # records are immutable, so only the containers need copying
        system = self.system
        return {
            'authority': system.governance.authority,
            'max_elections': system.governance.max_elections,
            'creation_fee': system.governance.creation_fee,
            'voters': dict(system.directory.voters),
            'elections': dict(system.registry.elections),
            'updates': dict(system.registry.updates),
            'name_index': dict(system.registry.name_index),
            'next_id': system.registry.next_id,
            'votes': dict(system.ballots.votes),
            'voted': {
                voter: list(ids) for voter, ids in system.ballots.voted.items()
            },
            'counts': {
                election_id: dict(counts)
                for election_id, counts in system.tallies.counts.items()
            },
        }

    def _rollback(self, snapshot: Dict[str, Any]) -> None:
        self._pending = []
        system = self.system
        system.governance.authority = snapshot['authority']
        system.governance.max_elections = snapshot['max_elections']
        system.governance.creation_fee = snapshot['creation_fee']
        system.directory.voters = snapshot['voters']
        system.registry.elections = snapshot['elections']
        system.registry.updates = snapshot['updates']
        system.registry.name_index = snapshot['name_index']
        system.registry.next_id = snapshot['next_id']
        system.ballots.votes = snapshot['votes']
        system.ballots.voted = snapshot['voted']
        system.tallies.counts = snapshot['counts']

    def _commit_transfers(self) -> None:
        for transfer in self._pending:
            if self.balances is not None:
                self.balances[transfer.sender] = (
                    self.balance(transfer.sender) - transfer.amount
                )
                self.balances[transfer.recipient] = (
                    self.balance(transfer.recipient) + transfer.amount
                )
            self.transfers.append(transfer)
            logger.info('transferred %d from %s to %s',
                        transfer.amount, transfer.sender, transfer.recipient)
        self._pending = []
