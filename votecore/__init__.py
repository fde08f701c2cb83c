"""Votecore - the election state machine of a ledger-anchored voting system.

Votecore keeps the state of elections run on a ledger and enforces the rules
of every operation that changes it:

-   Governance (the :mod:`governance` module) configures the authority that
    receives election creation fees, the maximum number of elections and the
    fee itself.
-   Voters register with an opaque biometric hash and may name a delegate
    (the :mod:`directory` module).
-   Elections are created and updated in the :mod:`registry` module, which
    validates every parameter and keeps election names unique.
-   Votes are cast with a commit-reveal protocol (the :mod:`ballot` module):
    a hash of the chosen option and a secret salt is submitted while voting
    is open and disclosed only in a later reveal window.
-   Revealed votes are counted in the :mod:`tally` module, which also checks
    quorums and determines winners.

The :class:`VotingSystem` from the :mod:`system` module combines all of
these over one state. The :mod:`ledger` module runs its operations as atomic
transactions with an explicit caller, clock and currency ledger, and the
:mod:`persist` module serializes the state to JSON-ready dictionaries.
"""
