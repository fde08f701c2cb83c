'''Errors raised by the election state machine.

Every rejected operation raises a subclass of :class:`VotingError`. Each
leaf class carries a stable integer ``code`` that identifies the failure
reason to external callers (the ledger runtime reports it as the value of a
failed :class:`votecore.ledger.Result`). The codes follow the numbering of
the on-chain contract the state machine is modelled on; codes from 128 up
cover failures that the contract only reported as a bare ``false``.

The leaf classes are grouped by category:

-   :class:`ConfigurationError` - governance is missing or misconfigured.
-   :class:`ValidationError` - an operation parameter is out of bounds.
-   :class:`CapacityError` - a configured limit was reached.
-   :class:`IdentityError` - the caller, the target voter or the election
    is unknown, duplicated, or not allowed to perform the operation.
-   :class:`BallotError` - the commit-reveal protocol forbids the operation.
-   :class:`TallyError` - tally preconditions are not satisfied.
'''

import abc
from typing import Any, Optional


class VotingError(Exception, metaclass=abc.ABCMeta):
    '''An operation was rejected by the election state machine.

    A rejected operation never leaves partial effects behind.

    :param message: Human-readable reason. Defaults to the class docstring
        summary.
    '''
    code: int = NotImplemented

    def __init__(self, message: Optional[str] = None):
        if message is None:
            message = self.__class__.__doc__.strip().split('\n')[0]
        super().__init__(message)

    @property
    def name(self) -> str:
        return self.__class__.__name__


class ConfigurationError(VotingError):
    '''Governance configuration does not permit the operation.'''
    pass


class ValidationError(VotingError):
    '''A parameter is out of its permitted range.

    :param value: The offending value.
    :param allowed: Description of permitted values, included in the
        message.
    :param value_name: Role of the value (e.g. ``max_voters``).
    '''
    value_name: str = 'parameter'

    def __init__(self,
                 value: Any,
                 allowed: Any = None,
                 value_name: Optional[str] = None,
                 ):
        self.value = value
        self.allowed = allowed
        if value_name is not None:
            self.value_name = value_name
        message = f'invalid {self.value_name}: {value!r}'
        if allowed is not None:
            message += f', allowed: {allowed}'
        super().__init__(message)


class CapacityError(VotingError):
    '''A configured capacity limit was reached.'''
    pass


class IdentityError(VotingError):
    '''An identity or election reference is invalid for the operation.'''
    pass


class BallotError(VotingError):
    '''The ballot protocol does not permit the operation.'''
    pass


class TallyError(VotingError):
    '''Tally preconditions are not satisfied.'''
    pass


class AuthorityNotVerifiedError(ConfigurationError):
    '''No authority identity has been configured.'''
    code = 109


class AlreadyConfiguredError(ConfigurationError):
    '''The authority identity has already been set.'''
    code = 128


class InvalidPrincipalError(ConfigurationError):
    '''The identity cannot act as the authority.'''
    code = 129

    def __init__(self, principal: Any):
        self.principal = principal
        super().__init__(f'invalid authority principal: {principal!r}')


class InvalidMaxVotersError(ValidationError):
    code = 101
    value_name = 'max_voters'


class InvalidOptionsError(ValidationError):
    code = 102
    value_name = 'options'


class InvalidDurationError(ValidationError):
    code = 103
    value_name = 'duration'


class InvalidQuorumError(ValidationError):
    code = 104
    value_name = 'quorum'


class InvalidThresholdError(ValidationError):
    code = 105
    value_name = 'threshold'


class InvalidMinVotesError(ValidationError):
    code = 110
    value_name = 'min_votes'


class InvalidMaxVotesError(ValidationError):
    code = 111
    value_name = 'max_votes'


class InvalidParamError(ValidationError):
    code = 112
    value_name = 'name'


class InvalidUpdateParamError(ValidationError):
    code = 113
    value_name = 'governance parameter'


class InvalidElectionKindError(ValidationError):
    code = 115
    value_name = 'election kind'


class InvalidAnonymityLevelError(ValidationError):
    code = 116
    value_name = 'anonymity_level'


class InvalidRevealPeriodError(ValidationError):
    code = 117
    value_name = 'reveal_period'


class InvalidJurisdictionError(ValidationError):
    code = 118
    value_name = 'jurisdiction'


class InvalidCurrencyError(ValidationError):
    code = 119
    value_name = 'currency'


class MaxElectionsExceededError(CapacityError):
    '''The maximum number of elections has been created.'''
    code = 114


class NotAuthorizedError(IdentityError):
    '''The caller is not allowed to modify the election.'''
    code = 100


class ElectionAlreadyExistsError(IdentityError):
    '''An election with the given name already exists.'''
    code = 106

    def __init__(self, name: str):
        self.election_name = name
        super().__init__(f'election already exists: {name!r}')


class ElectionNotFoundError(IdentityError):
    '''No election with the given id exists.'''
    code = 107

    def __init__(self, election_id: Any):
        self.election_id = election_id
        super().__init__(f'election not found: {election_id!r}')


class NotRegisteredError(IdentityError):
    '''The caller is not a registered voter.'''
    code = 121


class InvalidDelegateError(IdentityError):
    '''The delegation target is not a registered voter.'''
    code = 127

    def __init__(self, delegate: Any):
        self.delegate = delegate
        super().__init__(f'delegate is not a registered voter: {delegate!r}')


class AlreadyRegisteredError(IdentityError):
    '''The caller is already a registered voter.'''
    code = 130


class AlreadyVotedError(BallotError):
    '''The caller has already submitted a vote in the election.'''
    code = 122


class VotingClosedError(BallotError):
    '''The election does not accept votes at this height.'''
    code = 123


class InvalidCommitmentError(BallotError):
    '''The commitment is malformed or does not match the revealed vote.'''
    code = 124


class RevealFailedError(BallotError):
    '''The vote could not be revealed.'''
    code = 125


class VoteNotFoundError(RevealFailedError):
    '''The caller has no vote in the election.'''
    code = 131


class AlreadyRevealedError(RevealFailedError):
    '''The vote has already been revealed.'''
    code = 132


class InvalidOptionError(RevealFailedError):
    '''The revealed option is not offered by the election.'''
    code = 133

    def __init__(self, option: Any):
        self.option = option
        super().__init__(f'option not offered by the election: {option!r}')


class RevealNotOpenError(RevealFailedError):
    '''The reveal window is not open at this height.'''
    code = 134


class QuorumNotMetError(TallyError):
    '''Too few votes were revealed to satisfy the election quorum.'''
    code = 126

    def __init__(self, n_revealed: int, quorum_size: int):
        self.n_revealed = n_revealed
        self.quorum_size = quorum_size
        super().__init__(
            f'quorum not met: {n_revealed} revealed, {quorum_size} required'
        )


class TransferFailedError(VotingError):
    '''The ledger refused the currency transfer.'''
    code = 135
