"""Tests for account use cases."""

import pytest

from pymongo.errors import AutoReconnect

from moodmate.errors import AuthenticationError, ConflictError, NotFoundError, StoreError, ValidationError


class TestRegister:
    """Tests for account registration."""

    async def test_key_is_lowercased_email(self, services, registered):
        """Test that the identity key is the lowercased email and casing is kept."""
        assert registered.id == "ana@x.com"
        assert registered.email == "ANA@X.com"
        assert await services.user.has_user("ana@x.com") is True

    async def test_view_has_no_password_hash(self, registered):
        """Test that the returned view never exposes the hash."""
        assert "password_hash" not in registered.model_dump()

    async def test_password_is_hashed(self, services, registered):
        """Test that only a bcrypt hash is stored."""
        user = await services.user.get_user("ana@x.com")
        assert user.password_hash != "secret1"
        assert user.password_hash.startswith("$2")

    @pytest.mark.parametrize("email", ["ana@x.com", "ANA@X.COM", "Ana@x.com"])
    async def test_duplicate_email_any_case_conflicts(self, services, registered, email):
        """Test that a second registration in any casing raises ConflictError."""
        with pytest.raises(ConflictError):
            await services.auth.register("Other", email, "secret2")

    async def test_invalid_input_rejected(self, services):
        """Test that blank name, bad email and short password are rejected."""
        with pytest.raises(ValidationError):
            await services.auth.register("", "a@x.com", "secret1")
        with pytest.raises(ValidationError):
            await services.auth.register("Ana", "not-an-email", "secret1")
        with pytest.raises(ValidationError):
            await services.auth.register("Ana", "a@x.com", "12345")


class TestLogin:
    """Tests for credential verification and session issue."""

    async def test_login_with_lowercase_email(self, services, registered):
        """Test that login returns a token and the public user."""
        token, user = await services.auth.login("ana@x.com", "secret1")
        assert token
        assert user.model_dump() == {"id": "ana@x.com", "name": "Ana", "email": "ANA@X.com"}

    async def test_login_with_mixed_case_email(self, services, registered):
        """Test that the email is normalized before lookup."""
        token, _ = await services.auth.login("Ana@X.Com", "secret1")
        assert await services.session.validate(token) is not None

    async def test_wrong_password_and_unknown_user_look_identical(self, services, registered):
        """Test that failures do not reveal whether the email exists."""
        with pytest.raises(AuthenticationError) as wrong_password:
            await services.auth.login("ana@x.com", "wrong-password")
        with pytest.raises(AuthenticationError) as unknown_user:
            await services.auth.login("nobody@x.com", "secret1")
        assert str(wrong_password.value) == str(unknown_user.value)

    async def test_missing_credentials_unauthorized(self, services):
        """Test that missing credentials raise AuthenticationError."""
        with pytest.raises(AuthenticationError):
            await services.auth.login(None, None)

    async def test_each_login_issues_new_session(self, services, registered):
        """Test that concurrent sessions per user are independent."""
        first, _ = await services.auth.login("ana@x.com", "secret1")
        second, _ = await services.auth.login("ana@x.com", "secret1")
        assert first != second
        assert await services.session.validate(first) is not None
        assert await services.session.validate(second) is not None


class TestLogout:
    """Tests for session revocation."""

    async def test_logout_twice_succeeds(self, services, token):
        """Test that logout is idempotent."""
        await services.auth.logout(token)
        await services.auth.logout(token)
        assert await services.session.validate(token) is None

    async def test_logout_without_token(self, services):
        """Test that logout without a token is a no-op."""
        await services.auth.logout(None)


class TestGetProfile:
    """Tests for reading the profile."""

    async def test_returns_registered_profile(self, services, token):
        """Test that the profile matches the registration."""
        profile = await services.auth.get_profile(token)
        assert profile.name == "Ana"
        assert profile.email == "ANA@X.com"
        assert profile.profile_photo is None

    async def test_invalid_session_unauthorized(self, services):
        """Test that an unknown token raises AuthenticationError."""
        with pytest.raises(AuthenticationError):
            await services.auth.get_profile("bogus")

    async def test_vanished_user_is_not_found(self, services, token):
        """Test that a live session whose user is gone is reported, not hidden."""
        await services.user.delete_user("ana@x.com")
        with pytest.raises(NotFoundError):
            await services.auth.get_profile(token)


class TestUpdateProfile:
    """Tests for profile updates, including email renames."""

    async def test_same_email_updates_fields(self, services, token):
        """Test that an unchanged email is a plain field update."""
        profile = await services.auth.update_profile(token, "  Ana Maria ", "ANA@X.com")
        assert profile.name == "Ana Maria"
        assert profile.id == "ana@x.com"

    async def test_case_only_change_keeps_key(self, services, token):
        """Test that a case-only email change keeps the key and the session."""
        profile = await services.auth.update_profile(token, "Ana", "ana@x.com")
        assert profile.id == "ana@x.com"
        assert profile.email == "ana@x.com"
        assert (await services.session.validate(token)).owner_key == "ana@x.com"

    async def test_rename_keeps_session_valid(self, services, token):
        """Test that the session follows the identity to its new key."""
        profile = await services.auth.update_profile(token, "Ana", "b@x.com")

        assert profile.id == "b@x.com"
        session = await services.session.validate(token)
        assert session is not None
        assert session.owner_key == "b@x.com"
        assert (await services.auth.get_profile(token)).email == "b@x.com"
        assert await services.user.has_user("ana@x.com") is False

    async def test_rename_keeps_password_and_photo(self, services, token):
        """Test that a rename carries the password hash and photo over."""
        await services.auth.update_profile_photo(token, "data:image/png;base64,AAA")
        await services.auth.update_profile(token, "Ana", "b@x.com")

        token2, _ = await services.auth.login("b@x.com", "secret1")
        assert token2
        assert (await services.auth.get_profile(token)).profile_photo == "data:image/png;base64,AAA"
        with pytest.raises(AuthenticationError):
            await services.auth.login("ana@x.com", "secret1")

    async def test_rename_moves_every_session(self, services, token):
        """Test that all sessions of the identity are rewritten."""
        other, _ = await services.auth.login("ana@x.com", "secret1")
        await services.auth.update_profile(token, "Ana", "b@x.com")
        assert (await services.session.validate(other)).owner_key == "b@x.com"

    async def test_rename_moves_journal_entries(self, services, token):
        """Test that journal entries follow the identity."""
        await services.journal.create_entry("ana@x.com", "Good day", "happy")
        await services.auth.update_profile(token, "Ana", "b@x.com")
        assert (await services.journal.list_entries("b@x.com")).total == 1
        assert (await services.journal.list_entries("ana@x.com")).total == 0

    async def test_rename_onto_taken_email_conflicts(self, services, token):
        """Test that another identity at the new key raises ConflictError."""
        await services.auth.register("Bea", "b@x.com", "secret2")
        with pytest.raises(ConflictError):
            await services.auth.update_profile(token, "Ana", "B@x.com")

        session = await services.session.validate(token)
        assert session.owner_key == "ana@x.com"
        assert (await services.user.get_user("b@x.com")).name == "Bea"

    async def test_failed_rename_leaves_sessions_on_old_key(self, services, token, monkeypatch):
        """Test that sessions are only rewritten after a successful rename."""
        async def failing_rename(*args, **kwargs):
            raise ConflictError("Email is already in use")

        monkeypatch.setattr(services.user, "rename_user", failing_rename)
        with pytest.raises(ConflictError):
            await services.auth.update_profile(token, "Ana", "b@x.com")
        assert (await services.session.validate(token)).owner_key == "ana@x.com"

    async def test_retry_finishes_interrupted_rename(self, services, token, monkeypatch):
        """Test that retrying after a crash between write-new and delete-old completes the rename."""
        collection = services.user._collection

        class FailingDelete:
            def __getattr__(self, name):
                return getattr(collection, name)

            async def delete_one(self, *args, **kwargs):
                raise AutoReconnect("connection lost")

        await services.journal.create_entry("ana@x.com", "Good day", "happy")
        monkeypatch.setattr(services.user, "_collection", FailingDelete())
        with pytest.raises(StoreError):
            await services.auth.update_profile(token, "Ana", "b@x.com")

        assert await collection.find_one({"_id": "ana@x.com"}) is not None
        assert await collection.find_one({"_id": "b@x.com"}) is not None
        assert (await services.session.validate(token)).owner_key == "ana@x.com"

        monkeypatch.setattr(services.user, "_collection", collection)
        profile = await services.auth.update_profile(token, "Ana B", "b@x.com")

        assert profile.id == "b@x.com"
        assert profile.name == "Ana B"
        assert await services.user.has_user("ana@x.com") is False
        assert (await services.session.validate(token)).owner_key == "b@x.com"
        assert (await services.journal.list_entries("b@x.com")).total == 1
        new_token, _ = await services.auth.login("b@x.com", "secret1")
        assert new_token

    async def test_leftover_copy_of_other_identity_still_conflicts(self, services, token):
        """Test that a record at the new key with a different password hash is not resumed."""
        user = await services.user.get_user("ana@x.com")
        await services.user.create_user(user.model_copy(update={"id": "b@x.com", "password_hash": "$2b$04$other"}))

        with pytest.raises(ConflictError):
            await services.auth.update_profile(token, "Ana", "b@x.com")
        assert await services.user.has_user("ana@x.com") is True

    @pytest.mark.parametrize(
        ("name", "email", "message"),
        [
            ("", "b@x.com", "Name is required"),
            ("Ana", "", "Email is required"),
            ("Ana", "b@x", "Invalid email format"),
        ],
    )
    async def test_invalid_input(self, services, token, name, email, message):
        """Test that invalid name or email raises ValidationError."""
        with pytest.raises(ValidationError, match=message):
            await services.auth.update_profile(token, name, email)

    async def test_requires_session(self, services, registered):
        """Test that the call requires a valid session."""
        with pytest.raises(AuthenticationError):
            await services.auth.update_profile(None, "Ana", "b@x.com")


class TestChangePassword:
    """Tests for password changes."""

    async def test_length_five_rejected(self, services, token):
        """Test that a new password under the minimum length is rejected."""
        with pytest.raises(ValidationError):
            await services.auth.change_password(token, "secret1", "a" * 5)

    @pytest.mark.parametrize("length", [6, 100])
    async def test_boundary_lengths_accepted(self, services, token, length):
        """Test that lengths 6 and 100 are accepted and usable for login."""
        await services.auth.change_password(token, "secret1", "a" * length)
        new_token, _ = await services.auth.login("ana@x.com", "a" * length)
        assert new_token

    async def test_length_101_rejected(self, services, token):
        """Test that a new password over the maximum length is rejected."""
        with pytest.raises(ValidationError):
            await services.auth.change_password(token, "secret1", "a" * 101)

    async def test_long_passwords_differing_at_the_end(self, services, token):
        """Test that 100-character passwords differing only in the last character are distinct."""
        await services.auth.change_password(token, "secret1", "a" * 99 + "x")
        await services.auth.change_password(token, "a" * 99 + "x", "a" * 99 + "y")

        with pytest.raises(AuthenticationError):
            await services.auth.login("ana@x.com", "a" * 99 + "x")
        new_token, _ = await services.auth.login("ana@x.com", "a" * 99 + "y")
        assert new_token

    async def test_same_as_old_rejected(self, services, token):
        """Test that reusing the current password raises ValidationError."""
        with pytest.raises(ValidationError, match="different"):
            await services.auth.change_password(token, "secret1", "secret1")

    async def test_wrong_current_password_unauthorized(self, services, token):
        """Test that a wrong current password raises AuthenticationError."""
        with pytest.raises(AuthenticationError):
            await services.auth.change_password(token, "wrong-one", "newsecret")

    async def test_old_password_stops_working(self, services, token):
        """Test that login with the old password fails after a change."""
        await services.auth.change_password(token, "secret1", "newsecret")
        with pytest.raises(AuthenticationError):
            await services.auth.login("ana@x.com", "secret1")

    async def test_blank_current_password_rejected(self, services, token):
        """Test that a blank current password raises ValidationError."""
        with pytest.raises(ValidationError):
            await services.auth.change_password(token, "", "newsecret")


class TestProfilePhoto:
    """Tests for setting and resetting the profile photo."""

    async def test_set_and_reset(self, services, token, core):
        """Test that reset removes the photo field instead of blanking it."""
        profile = await services.auth.update_profile_photo(token, "data:image/png;base64,AAA")
        assert profile.profile_photo == "data:image/png;base64,AAA"

        profile = await services.auth.reset_profile_photo(token)
        assert profile.profile_photo is None
        doc = await core.database.get_collection("users").find_one({"_id": "ana@x.com"})
        assert "profile_photo" not in doc

    async def test_non_string_photo_rejected(self, services, token):
        """Test that a missing photo raises ValidationError."""
        with pytest.raises(ValidationError):
            await services.auth.update_profile_photo(token, None)

    async def test_requires_session(self, services):
        """Test that the call requires a valid session."""
        with pytest.raises(AuthenticationError):
            await services.auth.reset_profile_photo("bogus")
