"""Unit tests for taskmanager.core.security: bcrypt hashing and the JWT token codec."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from taskmanager.core.security import TokenCodec, hash_password, verify_password
from support import FixedClock

SECRET = "unit-test-secret-key-with-enough-bytes-for-hs256"
ISSUED_AT = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


class TestPasswordHashing(unittest.TestCase):
    def test_hash_and_verify(self) -> None:
        hashed = hash_password("secret123", rounds=4)
        self.assertNotEqual(hashed, "secret123")
        self.assertTrue(verify_password("secret123", hashed))
        self.assertFalse(verify_password("secret124", hashed))

    def test_hashes_are_salted(self) -> None:
        self.assertNotEqual(hash_password("secret123", rounds=4), hash_password("secret123", rounds=4))

    def test_verify_against_garbage_hash_is_false(self) -> None:
        self.assertFalse(verify_password("secret123", "not-a-bcrypt-hash"))


class TestTokenCodec(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FixedClock(ISSUED_AT)
        self.codec = TokenCodec(SECRET, expiration_ms=60_000, clock=self.clock)

    def test_subject_round_trip(self) -> None:
        for email in ("a@x.com", "someone.else+tag@example.org"):
            token = self.codec.issue(email)
            self.assertEqual(self.codec.verify_subject(token), email)
            self.assertEqual(self.codec.get_email(token), email)

    def test_claims(self) -> None:
        token = self.codec.issue("a@x.com")
        payload = jwt.decode(
            token, SECRET, algorithms=["HS256"], options={"verify_exp": False, "verify_iat": False}
        )
        self.assertEqual(payload["sub"], "a@x.com")
        self.assertEqual(payload["email"], "a@x.com")
        self.assertEqual(payload["iat"], int(ISSUED_AT.timestamp()))
        self.assertEqual(payload["exp"], ISSUED_AT.timestamp() + 60)
        self.assertEqual(jwt.get_unverified_header(token)["alg"], "HS256")

    def test_not_expired_one_millisecond_before_ttl(self) -> None:
        token = self.codec.issue("a@x.com")
        self.clock.advance(milliseconds=59_999)
        self.assertFalse(self.codec.is_expired(token))
        self.assertEqual(self.codec.verify_subject(token), "a@x.com")
        self.assertTrue(self.codec.validate(token, "a@x.com"))

    def test_expired_after_ttl(self) -> None:
        token = self.codec.issue("a@x.com")
        self.clock.advance(milliseconds=60_001)
        self.assertTrue(self.codec.is_expired(token))
        self.assertIsNone(self.codec.verify_subject(token))
        self.assertFalse(self.codec.validate(token, "a@x.com"))

    def test_expiry_boundary_when_issued_mid_second(self) -> None:
        self.clock.now = ISSUED_AT.replace(microsecond=700_000)
        token = self.codec.issue("a@x.com")
        self.clock.advance(milliseconds=59_999)
        self.assertFalse(self.codec.is_expired(token))
        self.assertEqual(self.codec.verify_subject(token), "a@x.com")
        self.clock.advance(milliseconds=2)
        self.assertTrue(self.codec.is_expired(token))

    def test_wrong_secret_is_rejected(self) -> None:
        other = TokenCodec("another-secret-key-with-enough-bytes-for-hs256", 60_000, clock=self.clock)
        token = other.issue("a@x.com")
        self.assertIsNone(self.codec.verify_subject(token))
        self.assertTrue(self.codec.is_expired(token))

    def test_malformed_token_never_raises(self) -> None:
        for token in ("", "garbage", "a.b.c"):
            self.assertIsNone(self.codec.verify_subject(token))
            self.assertIsNone(self.codec.get_email(token))
            self.assertTrue(self.codec.is_expired(token))
            self.assertFalse(self.codec.validate(token, "a@x.com"))

    def test_token_without_subject_is_rejected(self) -> None:
        token = jwt.encode(
            {"email": "a@x.com", "exp": ISSUED_AT + timedelta(minutes=1)}, SECRET, algorithm="HS256"
        )
        self.assertIsNone(self.codec.verify_subject(token))

    def test_validate_requires_matching_identity(self) -> None:
        token = self.codec.issue("a@x.com")
        self.assertFalse(self.codec.validate(token, "b@x.com"))


if __name__ == "__main__":
    unittest.main()
