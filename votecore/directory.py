'''Voter registration and vote delegation.'''

import logging
from typing import Dict, Optional

import votecore.config
from votecore.context import CallContext
from votecore.errors import (
    AlreadyRegisteredError,
    InvalidDelegateError,
    InvalidParamError,
    NotRegisteredError,
)
from votecore.governance import GovernanceStore
from votecore.records import Principal, Voter


logger = logging.getLogger(__name__)


class VoterDirectory:
    '''Registry of voter identities.

    Registration is permanent: a voter can neither unregister nor register
    again. A registered voter may name another registered voter as their
    delegate. Delegation is descriptive only: it is recorded as given,
    overwritten by the next delegation, and never resolved transitively, so
    self-delegation and delegation cycles are accepted.

    :param governance: Governance store; registration requires a configured
        authority.
    '''
    def __init__(self, governance: GovernanceStore):
        self.governance = governance
        self.voters: Dict[Principal, Voter] = {}

    def is_registered(self, principal: Principal) -> bool:
        return principal in self.voters

    def get(self, principal: Principal) -> Optional[Voter]:
        return self.voters.get(principal)

    def require_registered(self, principal: Principal) -> Voter:
        '''Return the voter record of a registered identity.

        :raises NotRegisteredError: If the identity is not registered.
        '''
        try:
            return self.voters[principal]
        except KeyError:
            raise NotRegisteredError from None

    def register(self, ctx: CallContext, voice_hash: bytes) -> bool:
        '''Register the caller as a voter.

        :param voice_hash: Opaque biometric hash produced by the enrolment
            front end.
        :raises AuthorityNotVerifiedError: If no authority is configured.
        :raises InvalidParamError: If the hash is not of the expected size.
        :raises AlreadyRegisteredError: If the caller is registered already.
        '''
        self.governance.require_authority()
        if (not isinstance(voice_hash, bytes)
                or len(voice_hash) != votecore.config.HASH_SIZE):
            raise InvalidParamError(
                voice_hash,
                f'{votecore.config.HASH_SIZE} bytes',
                'voice hash',
            )
        if ctx.caller in self.voters:
            raise AlreadyRegisteredError
        self.voters[ctx.caller] = Voter(voice_hash=voice_hash)
        logger.info('registered voter %s', ctx.caller)
        return True

    def delegate(self, ctx: CallContext, to: Principal) -> bool:
        '''Record another registered voter as the caller's delegate.

        :raises NotRegisteredError: If the caller is not registered.
        :raises InvalidDelegateError: If the target is not registered.
        '''
        voter = self.require_registered(ctx.caller)
        if to not in self.voters:
            raise InvalidDelegateError(to)
        self.voters[ctx.caller] = voter._replace(delegate=to)
        logger.info('voter %s delegated to %s', ctx.caller, to)
        return True
