'''Per-call execution context supplied by the ledger.

The state machine never reads the caller, the clock or the currency ledger
from global state; every mutating operation receives them in a
:class:`CallContext`.
'''

from typing import Callable, NamedTuple

from votecore.records import Principal


TransferFunction = Callable[[int, Principal, Principal], bool]


def accept_transfer(amount: int, sender: Principal, recipient: Principal
                    ) -> bool:
    '''A transfer primitive that accepts every transfer without effects.'''
    return True


class CallContext(NamedTuple):
    '''Who calls an operation, when, and how it can move currency.

    :param caller: Authenticated identity of the caller.
    :param height: Current ledger height (logical clock).
    :param transfer: One-way native currency transfer primitive, called as
        ``transfer(amount, sender, recipient)``; returns whether the
        transfer succeeded.
    '''
    caller: Principal
    height: int = 0
    transfer: TransferFunction = accept_transfer
