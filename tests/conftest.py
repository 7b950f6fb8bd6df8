"""Test environment: in-memory SQLite, fast bcrypt, no SMTP. Must run before taskmanager is imported."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["JWT_EXPIRATION_MS"] = "3600000"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOGIN_MAX_ATTEMPTS"] = "6"
os.environ["FRONTEND_URL"] = "http://frontend.test"
os.environ.pop("SMTP_HOST", None)
