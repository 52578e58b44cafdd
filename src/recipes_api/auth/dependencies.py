"""FastAPI dependencies for session-based authentication.

``SessionMiddleware`` puts a ``Session`` on ``request.state``; these
dependencies turn its ``user_id`` entry into a user record.
"""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request

from recipes_api.core.exceptions import UnauthorizedException
from recipes_api.database.repositories.users import UserRecord, UserRepository
from recipes_api.observability.logging import get_logger
from recipes_api.session.session import Session


logger = get_logger(__name__)

SESSION_USER_KEY = "user_id"


def get_session(request: Request) -> Session:
    """Return the request's session.

    Raises:
        RuntimeError: If SessionMiddleware is not installed for this path.
    """
    session: Session | None = getattr(request.state, "session", None)
    if session is None:
        msg = "No session on request; is SessionMiddleware installed?"
        raise RuntimeError(msg)
    return session


def get_user_repository() -> UserRepository:
    return UserRepository()


async def get_current_user_optional(
    session: Annotated[Session, Depends(get_session)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> UserRecord | None:
    """The logged-in user, or None for anonymous requests.

    A ``user_id`` that no longer resolves to an account is dropped from the
    session.
    """
    raw_user_id = session.get(SESSION_USER_KEY)
    if not raw_user_id:
        return None

    try:
        user_id = UUID(str(raw_user_id))
    except ValueError:
        session.remove(SESSION_USER_KEY)
        return None

    user = await users.get_by_id(user_id)
    if user is None:
        logger.info("Session refers to a deleted user", user_id=str(user_id))
        session.remove(SESSION_USER_KEY)
    return user


async def get_current_user(
    user: Annotated[UserRecord | None, Depends(get_current_user_optional)],
) -> UserRecord:
    """The logged-in user.

    Raises:
        UnauthorizedException: For anonymous requests.
    """
    if user is None:
        raise UnauthorizedException
    return user


def login_session(session: Session, user: UserRecord) -> None:
    """Bind ``user`` to the session and rotate its id to prevent fixation."""
    session.insert(SESSION_USER_KEY, str(user.id))
    session.regenerate()


CurrentUser = Annotated[UserRecord, Depends(get_current_user)]
OptionalUser = Annotated[UserRecord | None, Depends(get_current_user_optional)]
SessionDep = Annotated[Session, Depends(get_session)]
