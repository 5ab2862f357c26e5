"""Unit tests for auth_service module."""

import unittest
from datetime import timedelta
from unittest.mock import MagicMock

from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    UnexpectedError,
    ValidationError,
)
from services.auth_service import (
    authenticate,
    authorize_and_fetch,
    fetch_authorized_user,
    register,
    verify_bearer,
)
from services.password_service import verify_password
from services.token_service import TokenService


class AuthServiceTestCase(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.tokens = TokenService('test-secret')


class TestRegister(AuthServiceTestCase):
    """Test register function."""

    def test_register_success(self):
        user, token = register(self.repo, self.tokens, 'Alice', 'a@x.com', 'pw123456')

        self.assertEqual(user.name, 'Alice')
        self.assertEqual(user.email, 'a@x.com')
        self.assertIsNone(user.password_hash)
        self.assertEqual(self.tokens.verify(token).user_id, user.id)

    def test_register_stores_hash_not_plaintext(self):
        user, _ = register(self.repo, self.tokens, 'Alice', 'a@x.com', 'pw123456')

        stored = self.repo.store[user.id]
        self.assertNotEqual(stored.password_hash, 'pw123456')
        self.assertTrue(verify_password('pw123456', stored.password_hash))

    def test_register_missing_fields(self):
        cases = [
            (None, 'a@x.com', 'pw123456'),
            ('Alice', '', 'pw123456'),
            ('Alice', 'a@x.com', None),
        ]
        for name, email, password in cases:
            with self.subTest(name=name, email=email, password=password):
                with self.assertRaises(ValidationError):
                    register(self.repo, self.tokens, name, email, password)

        self.assertEqual(self.repo.store, {})

    def test_register_twice_conflicts(self):
        register(self.repo, self.tokens, 'Alice', 'a@x.com', 'pw123456')

        with self.assertRaises(ConflictError):
            register(self.repo, self.tokens, 'Other Alice', 'a@x.com', 'different')

        self.assertEqual(len(self.repo.store), 1)

    def test_email_is_case_sensitive(self):
        register(self.repo, self.tokens, 'Alice', 'a@x.com', 'pw123456')
        user, _ = register(self.repo, self.tokens, 'Alice', 'A@x.com', 'pw123456')

        self.assertEqual(user.email, 'A@x.com')
        self.assertEqual(len(self.repo.store), 2)

    def test_register_conflict_from_store_race(self):
        """A concurrent signup that passes the lookup still fails on create."""
        repo = MagicMock()
        repo.get_by_email.return_value = None
        repo.new_id.return_value = 'user-1'
        repo.create.side_effect = ConflictError("User already registered with this email")

        with self.assertRaises(ConflictError):
            register(repo, self.tokens, 'Alice', 'a@x.com', 'pw123456')

    def test_register_uses_allocated_id_for_token_and_record(self):
        user, token = register(self.repo, self.tokens, 'Alice', 'a@x.com', 'pw123456')

        self.assertIn(user.id, self.repo.store)
        self.assertEqual(self.tokens.verify(token).user_id, user.id)

    def test_register_signing_failure_leaves_no_record(self):
        tokens = MagicMock()
        tokens.issue.side_effect = RuntimeError("signing failed")

        with self.assertRaises(RuntimeError):
            register(self.repo, tokens, 'Alice', 'a@x.com', 'pw123456')

        self.assertEqual(self.repo.store, {})

    def test_register_store_failure_propagates(self):
        repo = MagicMock()
        repo.get_by_email.side_effect = UnexpectedError("Failed to get user")

        with self.assertRaises(UnexpectedError):
            register(repo, self.tokens, 'Alice', 'a@x.com', 'pw123456')
        repo.create.assert_not_called()


class TestAuthenticate(AuthServiceTestCase):
    """Test authenticate function."""

    def setUp(self):
        super().setUp()
        self.user, _ = register(self.repo, self.tokens, 'Alice', 'a@x.com', 'pw123456')

    def test_authenticate_success(self):
        token = authenticate(self.repo, self.tokens, 'a@x.com', 'pw123456')

        claims = self.tokens.verify(token)
        self.assertEqual(claims.user_id, self.user.id)
        self.assertEqual(claims.email, 'a@x.com')

    def test_wrong_password(self):
        with self.assertRaises(InvalidCredentialsError):
            authenticate(self.repo, self.tokens, 'a@x.com', 'wrong-password')

    def test_unknown_email_same_error_as_wrong_password(self):
        with self.assertRaises(InvalidCredentialsError) as unknown:
            authenticate(self.repo, self.tokens, 'nobody@x.com', 'pw123456')
        with self.assertRaises(InvalidCredentialsError) as wrong:
            authenticate(self.repo, self.tokens, 'a@x.com', 'wrong-password')

        self.assertIs(type(unknown.exception), type(wrong.exception))
        self.assertEqual(str(unknown.exception), str(wrong.exception))

    def test_missing_fields(self):
        with self.assertRaises(ValidationError):
            authenticate(self.repo, self.tokens, 'a@x.com', '')
        with self.assertRaises(ValidationError):
            authenticate(self.repo, self.tokens, None, 'pw123456')


class TestAuthorizeAndFetch(AuthServiceTestCase):
    """Test authorize_and_fetch function."""

    def setUp(self):
        super().setUp()
        self.user, self.token = register(self.repo, self.tokens, 'Alice', 'a@x.com', 'pw123456')

    def test_returns_user_without_hash(self):
        user = authorize_and_fetch(self.repo, self.tokens, self.token)

        self.assertEqual(user.id, self.user.id)
        self.assertEqual(user.name, 'Alice')
        self.assertEqual(user.email, 'a@x.com')
        self.assertIsNone(user.password_hash)

    def test_token_from_authenticate_works(self):
        token = authenticate(self.repo, self.tokens, 'a@x.com', 'pw123456')

        self.assertEqual(authorize_and_fetch(self.repo, self.tokens, token).id, self.user.id)

    def test_missing_token(self):
        for token in (None, ''):
            with self.subTest(token=token):
                with self.assertRaises(MissingTokenError):
                    authorize_and_fetch(self.repo, self.tokens, token)

    def test_invalid_token(self):
        with self.assertRaises(InvalidTokenError):
            authorize_and_fetch(self.repo, self.tokens, 'garbage')

    def test_expired_token(self):
        expired = TokenService('test-secret', ttl=timedelta(seconds=-10)).issue(self.user.id, self.user.email)

        with self.assertRaises(InvalidTokenError):
            authorize_and_fetch(self.repo, self.tokens, expired)

    def test_token_for_unknown_user(self):
        token = self.tokens.issue('deleted-user', 'gone@x.com')

        with self.assertRaises(InvalidTokenError):
            authorize_and_fetch(self.repo, self.tokens, token)


class TestVerifyBearer(AuthServiceTestCase):
    """Test verify_bearer and fetch_authorized_user separately."""

    def test_verify_bearer_returns_claims(self):
        token = self.tokens.issue('user-1', 'a@x.com')

        claims = verify_bearer(self.tokens, token)

        self.assertEqual(claims.user_id, 'user-1')
        self.assertEqual(claims.email, 'a@x.com')

    def test_verify_bearer_missing_and_invalid(self):
        with self.assertRaises(MissingTokenError):
            verify_bearer(self.tokens, None)
        with self.assertRaises(InvalidTokenError):
            verify_bearer(self.tokens, 'garbage')

    def test_fetch_authorized_user(self):
        user, token = register(self.repo, self.tokens, 'Alice', 'a@x.com', 'pw123456')

        found = fetch_authorized_user(self.repo, self.tokens.verify(token))

        self.assertEqual(found.id, user.id)
        self.assertIsNone(found.password_hash)


if __name__ == '__main__':
    unittest.main()
