import structlog

from moodmate.core.core import Service
from moodmate.core.modules.session.models import SessionToken
from moodmate.core.modules.user.models import PublicUser, User, UserView
from moodmate.core.modules.user.password import hash_password, verify_password
from moodmate.core.modules.user.validators import validate_email, validate_name, validate_password
from moodmate.errors import AuthenticationError, ConflictError, ValidationError
from moodmate.utils import normalize_email, now

logger = structlog.get_logger(__name__)


class AuthService(Service):
    """Account use cases: registration, login, and profile changes.

    Every call that takes a token validates the session first. Identity
    records are changed only here, sessions only through SessionService.
    """

    async def register(self, name: str | None, email: str | None, password: str | None) -> UserView:
        name = validate_name(name)
        email = validate_email(email)
        password = self._validate_password(password)

        user = User(id=normalize_email(email), name=name, email=email, password_hash=hash_password(password))
        await self.core.services.user.create_user(user)
        logger.info("user_registered", key=user.key)
        return UserView.from_domain(user)

    async def login(self, email: str | None, password: str | None) -> tuple[SessionToken, PublicUser]:
        """Verify credentials and issue a session.

        Unknown email and wrong password raise the same AuthenticationError.
        """
        if not email or not password:
            raise AuthenticationError

        key = normalize_email(email)
        user = await self.core.services.user.find_user(key)
        if user is None:
            logger.info("login_failed", key=key, reason="unknown_user")
            raise AuthenticationError
        if not verify_password(password, user.password_hash):
            logger.info("login_failed", key=key, reason="bad_password")
            raise AuthenticationError

        token = await self.core.services.session.issue(user.key, user.email)
        logger.info("login_succeeded", key=key)
        return token, PublicUser.from_domain(user)

    async def logout(self, token: str | None) -> None:
        await self.core.services.session.revoke(token)

    async def get_profile(self, token: str | None) -> UserView:
        _, user = await self.core.services.access.ensure_authenticated(token)
        return UserView.from_domain(user)

    async def update_profile(self, token: str | None, name: str | None, email: str | None) -> UserView:
        """Update name and email; a new email moves the user to a new key.

        The rename must succeed before sessions and journal entries are
        pointed at the new key, so a failed rename leaves them on the
        still-valid old key. If the new key already holds a copy of this
        same identity from an interrupted rename, the rename is resumed
        instead of rejected.
        """
        _, user = await self.core.services.access.ensure_authenticated(token)
        name = validate_name(name)
        email = validate_email(email)
        new_key = normalize_email(email)
        updated_at = now()

        if new_key == user.key:
            updated = await self.core.services.user.update_fields(
                user.key, {"name": name, "email": email, "updated_at": updated_at}
            )
            return UserView.from_domain(updated)

        def mutate(current: User) -> User:
            return current.model_copy(update={"name": name, "email": email, "updated_at": updated_at})

        existing = await self.core.services.user.find_user(new_key)
        if existing is None:
            renamed = await self.core.services.user.rename_user(user.key, new_key, mutate)
        elif existing.is_same_identity(user):
            renamed = await self.core.services.user.resume_rename(user.key, new_key, mutate)
        else:
            raise ConflictError("Email is already in use")
        await self.core.services.session.rewrite_owner(user.key, new_key, email)
        await self.core.services.journal.rewrite_owner(user.key, new_key)
        return UserView.from_domain(renamed)

    async def change_password(self, token: str | None, current_password: str | None, new_password: str | None) -> UserView:
        _, user = await self.core.services.access.ensure_authenticated(token)
        if not current_password or not current_password.strip():
            raise ValidationError("Current password is required")
        new_password = self._validate_password(new_password)

        if not verify_password(current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")
        if verify_password(new_password, user.password_hash):
            raise ValidationError("New password must be different from the current password")

        updated = await self.core.services.user.update_fields(
            user.key, {"password_hash": hash_password(new_password), "updated_at": now()}
        )
        logger.info("password_changed", key=user.key)
        return UserView.from_domain(updated)

    async def update_profile_photo(self, token: str | None, photo: str | None) -> UserView:
        _, user = await self.core.services.access.ensure_authenticated(token)
        if not isinstance(photo, str):
            raise ValidationError("Invalid photo data")
        updated = await self.core.services.user.update_fields(user.key, {"profile_photo": photo, "updated_at": now()})
        return UserView.from_domain(updated)

    async def reset_profile_photo(self, token: str | None) -> UserView:
        _, user = await self.core.services.access.ensure_authenticated(token)
        updated = await self.core.services.user.update_fields(user.key, {"updated_at": now()}, ["profile_photo"])
        return UserView.from_domain(updated)

    def _validate_password(self, password: str | None) -> str:
        config = self.core.config
        return validate_password(password, config.password_min_length, config.password_max_length)
