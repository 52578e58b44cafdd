"""Account registration, login and email confirmation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from recipes_api.auth.passwords import hash_password, verify_password
from recipes_api.auth.tokens import TokenError, decode_confirmation_token
from recipes_api.database.exceptions import DuplicateRecordError
from recipes_api.database.repositories.users import UserRepository
from recipes_api.observability.logging import get_logger
from recipes_api.observability.metrics import AUTH_EVENTS
from recipes_api.services.auth.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidConfirmationTokenError,
    InvalidCredentialsError,
)
from recipes_api.workers.jobs import enqueue_confirmation_email


if TYPE_CHECKING:
    from recipes_api.clients.oauth.schemas import OAuthIdentity
    from recipes_api.database.repositories.users import UserRecord

logger = get_logger(__name__)


class AuthService:
    def __init__(self, users: UserRepository | None = None) -> None:
        self.users = users or UserRepository()

    async def register(self, email: str, name: str, password: str) -> UserRecord:
        """Create an unconfirmed account and queue its confirmation email.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken.
        """
        password_hash = await hash_password(password)
        try:
            user = await self.users.create(
                email=email, name=name, password_hash=password_hash
            )
        except DuplicateRecordError as e:
            AUTH_EVENTS.labels(event="register", outcome="duplicate").inc()
            raise EmailAlreadyRegisteredError(email.lower()) from e

        AUTH_EVENTS.labels(event="register", outcome="success").inc()
        await enqueue_confirmation_email(user.id, user.email, user.name)
        return user

    async def authenticate(self, email: str, password: str) -> UserRecord:
        """Check an email/password pair.

        Raises:
            InvalidCredentialsError: On any mismatch.
        """
        user = await self.users.get_by_email(email)
        valid = await verify_password(password, user.password_hash if user else None)
        if user is None or not valid:
            AUTH_EVENTS.labels(event="login", outcome="failure").inc()
            logger.info("Login failed", reason="invalid_credentials")
            raise InvalidCredentialsError

        AUTH_EVENTS.labels(event="login", outcome="success").inc()
        return user

    async def confirm_email(self, token: str) -> None:
        """Mark the account a confirmation token was issued for as confirmed.

        Raises:
            InvalidConfirmationTokenError: If the token is bad, expired, or the
                account no longer exists.
        """
        try:
            user_id = decode_confirmation_token(token)
        except TokenError as e:
            raise InvalidConfirmationTokenError(str(e)) from e

        if not await self.users.confirm(user_id):
            msg = "Account no longer exists"
            raise InvalidConfirmationTokenError(msg)

        AUTH_EVENTS.labels(event="confirm", outcome="success").inc()
        logger.info("Email confirmed", user_id=str(user_id))

    async def login_oauth(self, identity: OAuthIdentity) -> UserRecord:
        """Find or create the account for an external identity.

        Accounts are matched by provider id first, then by email (linking
        the identity to the existing account); otherwise a new confirmed,
        password-less account is created.

        An unconfirmed account found by email loses its password when it is
        linked: whoever set that password never proved they own the address.

        Raises:
            EmailAlreadyRegisteredError: If the email belongs to an account
                linked to a different identity.
        """
        user = await self.users.get_by_oauth_id(identity.oauth_id)
        if user is not None:
            AUTH_EVENTS.labels(event="oauth", outcome="existing").inc()
            return user

        user = await self.users.get_by_email(identity.email)
        if user is not None:
            if user.oauth_id is not None and user.oauth_id != identity.oauth_id:
                logger.warning(
                    "Email already linked to another identity", user_id=str(user.id)
                )
                AUTH_EVENTS.labels(event="oauth", outcome="conflict").inc()
                raise EmailAlreadyRegisteredError(identity.email)

            linked = await self.users.link_oauth(
                user.id,
                identity.oauth_id,
                revoke_password=not user.is_confirmed,
            )
            if linked is None:
                # Linked to another identity or deleted since the lookup
                raise EmailAlreadyRegisteredError(identity.email)
            logger.info(
                "Linked OAuth identity",
                user_id=str(user.id),
                password_revoked=not user.is_confirmed,
            )
            AUTH_EVENTS.labels(event="oauth", outcome="linked").inc()
            return linked

        try:
            user = await self.users.create(
                email=identity.email,
                name=identity.name,
                oauth_id=identity.oauth_id,
                is_confirmed=True,
            )
        except DuplicateRecordError as e:
            raise EmailAlreadyRegisteredError(identity.email) from e

        AUTH_EVENTS.labels(event="oauth", outcome="created").inc()
        return user
