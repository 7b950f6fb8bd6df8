"""Unit tests for explicit request validation (Ok / Invalid) and the auth request schemas."""

import unittest

from taskmanager.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
)
from taskmanager.schemas.task import TaskWrite
from taskmanager.schemas.validation import Invalid, Ok, validate_payload


class TestValidatePayload(unittest.TestCase):
    def test_ok_result_carries_model(self) -> None:
        result = validate_payload(LoginRequest, {"email": " A@X.com ", "password": "pw"})
        self.assertIsInstance(result, Ok)
        self.assertEqual(result.value.email, "a@x.com")

    def test_non_object_body_is_invalid(self) -> None:
        for body in (None, [], "text", 3):
            result = validate_payload(LoginRequest, body)
            self.assertIsInstance(result, Invalid)
            self.assertIn("body", result.errors)

    def test_missing_fields_reported_per_field(self) -> None:
        result = validate_payload(LoginRequest, {})
        self.assertIsInstance(result, Invalid)
        self.assertEqual(set(result.errors), {"email", "password"})
        self.assertIn("email", result.message)

    def test_custom_validator_message_has_no_prefix(self) -> None:
        result = validate_payload(ForgotPasswordRequest, {"email": "   "})
        self.assertIsInstance(result, Invalid)
        self.assertEqual(result.errors["email"], "Email must not be blank.")


class TestRegisterRequest(unittest.TestCase):
    def _body(self, **overrides: object) -> dict:
        body = {"username": "alice", "email": "Alice@X.com", "password": "secret123"}
        body.update(overrides)
        return body

    def test_valid(self) -> None:
        result = validate_payload(RegisterRequest, self._body(roles=[{"name": "ROLE_ADMIN"}]))
        self.assertIsInstance(result, Ok)
        self.assertEqual(result.value.email, "alice@x.com")
        self.assertEqual(result.value.roles, [{"name": "ROLE_ADMIN"}])

    def test_rejects_bad_email(self) -> None:
        result = validate_payload(RegisterRequest, self._body(email="not-an-email"))
        self.assertIsInstance(result, Invalid)
        self.assertIn("email", result.errors)

    def test_rejects_short_username_and_password(self) -> None:
        result = validate_payload(RegisterRequest, self._body(username="ab", password="12345"))
        self.assertIsInstance(result, Invalid)
        self.assertEqual(set(result.errors), {"username", "password"})

    def test_rejects_long_email(self) -> None:
        result = validate_payload(RegisterRequest, self._body(email=("a" * 45) + "@x.com"))
        self.assertIsInstance(result, Invalid)
        self.assertIn("email", result.errors)


class TestOtherSchemas(unittest.TestCase):
    def test_reset_password_min_length(self) -> None:
        self.assertIsInstance(
            validate_payload(ResetPasswordRequest, {"token": "t", "password": "12345"}), Invalid
        )
        self.assertIsInstance(
            validate_payload(ResetPasswordRequest, {"token": "t", "password": "123456"}), Ok
        )

    def test_task_defaults_to_not_completed(self) -> None:
        result = validate_payload(TaskWrite, {"title": "Write docs", "description": "README"})
        self.assertIsInstance(result, Ok)
        self.assertFalse(result.value.completed)


if __name__ == "__main__":
    unittest.main()
