import structlog

from moodmate.core.core import Service
from moodmate.core.modules.journal.models import JournalEntry
from moodmate.core.modules.session.models import Session
from moodmate.core.modules.user.models import User
from moodmate.errors import AccessDeniedError, AuthenticationError, NotFoundError

logger = structlog.get_logger(__name__)


class AccessService(Service):
    async def ensure_session(self, token: str | None) -> Session:
        """Ensure the token maps to a live session."""
        session = await self.core.services.session.validate(token)
        if session is None:
            raise AuthenticationError("Invalid session")
        return session

    async def ensure_authenticated(self, token: str | None) -> tuple[Session, User]:
        """Ensure the session is valid and its owner still exists."""
        session = await self.ensure_session(token)
        user = await self.core.services.user.find_user(session.owner_key)
        if user is None:
            # A live session must always reference an existing user
            logger.error("session_owner_missing", owner_key=session.owner_key)
            raise NotFoundError("User not found")
        return session, user

    def ensure_journal_owner(self, session: Session, entry: JournalEntry) -> None:
        """Ensure the journal entry belongs to the session owner."""
        if entry.owner_key != session.owner_key:
            raise AccessDeniedError("Access denied")
