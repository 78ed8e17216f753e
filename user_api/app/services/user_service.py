"""
Business logic for users.

``UserService`` validates input and enforces email uniqueness before
delegating to a user store.  It keeps no state of its own besides the
store reference, so one instance can serve concurrent requests.

The duplicate check and the following write are separate store calls.
The store's UNIQUE constraint on ``email`` is the authority: if a
concurrent request slips in between, the store raises
``EmailConflictError`` and it is reported as ``DuplicateEmailError``
just like the early check.
"""

import logging
from typing import List, Optional, Tuple

from ..core.errors import (
    DuplicateEmailError,
    InvalidInputError,
    UnexpectedError,
    UserNotFoundError,
)
from ..stores.user_store import (
    EmailConflictError,
    RecordNotFoundError,
    UserRecord,
    UserStore,
)


logger = logging.getLogger(__name__)


class UserService:
    """Validated CRUD operations over a ``UserStore``."""

    def __init__(self, store: UserStore) -> None:
        self.store = store

    async def get_user_by_id(self, user_id: int) -> UserRecord:
        """Return the user with ``user_id``.

        Raises ``UserNotFoundError`` if there is none.
        """
        return await self._get_existing(user_id)

    async def list_users(self, limit: int, offset: int) -> Tuple[List[UserRecord], int]:
        """Return one page of users ordered by id and the total user count.

        The page and the count are fetched independently; under
        concurrent writes they may disagree.
        """
        try:
            users = await self.store.list(limit, offset)
        except Exception as exc:
            raise UnexpectedError(f"Failed to list users: {exc}") from exc
        try:
            total = await self.store.count()
        except Exception as exc:
            raise UnexpectedError(f"Failed to count users: {exc}") from exc
        return users, total

    async def create_user(self, name: str, email: str) -> UserRecord:
        """Create a new user after validation and the duplicate check.

        Raises ``InvalidInputError`` if ``name`` or ``email`` is empty
        (no whitespace trimming) and ``DuplicateEmailError`` if another
        user already has ``email``.
        """
        if not name or not email:
            raise InvalidInputError("Name and email must not be empty")

        await self._ensure_email_available(email)

        try:
            user = await self.store.insert(name, email)
        except EmailConflictError as exc:
            logger.warning("Store rejected duplicate email %s on create", email)
            raise DuplicateEmailError() from exc
        except Exception as exc:
            raise UnexpectedError(f"Failed to create user: {exc}") from exc

        logger.info("Created user %s", user.id)
        return user

    async def update_user(
        self,
        user_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> UserRecord:
        """Update ``name`` and/or ``email`` of an existing user.

        ``None`` leaves a field unchanged.  A provided value must not be
        empty; a missing user is reported before an empty value.
        Changing the email to one held by a different user raises
        ``DuplicateEmailError``; keeping the user's own email is fine.
        The store write happens even when nothing changes, so
        ``updated_at`` always advances.
        """
        existing = await self._get_existing(user_id)

        if name == "" or email == "":
            raise InvalidInputError("Name and email must not be empty")

        if name is None:
            name = existing.name
        if email is None:
            email = existing.email

        if email != existing.email:
            await self._ensure_email_available(email, owner_id=user_id)

        try:
            user = await self.store.update(user_id, name, email)
        except EmailConflictError as exc:
            logger.warning("Store rejected duplicate email %s on update of user %s", email, user_id)
            raise DuplicateEmailError("Email already in use by another user") from exc
        except RecordNotFoundError as exc:
            raise UserNotFoundError() from exc
        except Exception as exc:
            raise UnexpectedError(f"Failed to update user: {exc}") from exc

        logger.info("Updated user %s", user_id)
        return user

    async def delete_user(self, user_id: int) -> None:
        """Delete an existing user.

        Raises ``UserNotFoundError`` if there is none.
        """
        await self._get_existing(user_id)

        try:
            await self.store.delete(user_id)
        except RecordNotFoundError as exc:
            raise UserNotFoundError() from exc
        except Exception as exc:
            raise UnexpectedError(f"Failed to delete user: {exc}") from exc

        logger.info("Deleted user %s", user_id)

    async def _get_existing(self, user_id: int) -> UserRecord:
        try:
            return await self.store.find_by_id(user_id)
        except RecordNotFoundError as exc:
            raise UserNotFoundError() from exc
        except Exception as exc:
            raise UnexpectedError(f"Failed to get user: {exc}") from exc

    async def _ensure_email_available(self, email: str, owner_id: Optional[int] = None) -> None:
        try:
            duplicate = await self.store.find_by_email(email)
        except RecordNotFoundError:
            return
        except Exception as exc:
            raise UnexpectedError(f"Failed to check for duplicate email: {exc}") from exc

        if duplicate.id != owner_id:
            logger.warning("Rejected duplicate email %s", email)
            if owner_id is None:
                raise DuplicateEmailError()
            raise DuplicateEmailError("Email already in use by another user")
