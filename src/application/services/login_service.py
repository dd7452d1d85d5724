"""Credential checks and anonymous sign-in.

Every committee has a shared passphrase and all chairs share one chair
passphrase. These are shared secrets, not accounts: a successful check
only admits the session to the committee, and the user's identity comes
from the anonymous identity provider.
"""

from __future__ import annotations

import hmac
from collections.abc import Mapping

from src.application.ports.identity_provider import IdentityProviderProtocol
from src.application.services.base import LoggingMixin
from src.domain.errors.session import InvalidCredentialsError
from src.domain.models.committee import CommitteeId
from src.domain.models.session import UserId


def _matches(expected: str, candidate: str) -> bool:
    return hmac.compare_digest(expected.encode("utf-8"), candidate.encode("utf-8"))


class LoginService(LoggingMixin):
    """Verifies committee and chair passphrases."""

    def __init__(
        self,
        identity: IdentityProviderProtocol,
        committee_passphrases: Mapping[CommitteeId, str],
        chair_passphrase: str,
    ) -> None:
        """Initialize the service.

        Args:
            identity: Anonymous identity provider.
            committee_passphrases: Passphrase for every known committee.
            chair_passphrase: The shared chair passphrase.
        """
        self._identity = identity
        self._committee_passphrases = dict(committee_passphrases)
        self._chair_passphrase = chair_passphrase
        self._init_logger(component="login")

    def verify_committee(self, committee: str | CommitteeId, passphrase: str) -> CommitteeId:
        """Check a committee passphrase.

        Returns:
            The resolved committee.

        Raises:
            InvalidCredentialsError: If the committee is unknown or the
                passphrase does not match.
        """
        log = self._log_operation("verify_committee", committee=str(committee))
        try:
            committee_id = CommitteeId.parse(committee)
        except ValueError:
            log.info("unknown_committee")
            raise InvalidCredentialsError("Invalid committee or password") from None

        expected = self._committee_passphrases.get(committee_id)
        if expected is None or not _matches(expected, passphrase):
            log.info("committee_passphrase_rejected")
            raise InvalidCredentialsError("Invalid committee or password")
        return committee_id

    def verify_chair(self, passphrase: str) -> None:
        """Check the chair passphrase.

        Raises:
            InvalidCredentialsError: If the passphrase does not match.
        """
        if not _matches(self._chair_passphrase, passphrase):
            self._log_operation("verify_chair").info("chair_passphrase_rejected")
            raise InvalidCredentialsError("Invalid chair password")

    async def sign_in(self) -> UserId:
        """Anonymous sign-in; reuses the current identity if one exists.

        Raises:
            IdentityUnavailableError: If the identity provider fails.
        """
        current = self._identity.current_user()
        if current is not None:
            return current
        user_id = await self._identity.sign_in_anonymously()
        self._log_operation("sign_in", user_id=user_id).info("signed_in_anonymously")
        return user_id
