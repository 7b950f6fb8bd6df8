"""
Create a user (e.g. first admin) through the same path as POST /auth/register.
Run from project root:
  python -m taskmanager.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m taskmanager.scripts.create_user admin admin@example.com your-secure-password ROLE_ADMIN
"""
import argparse
import logging
import sys

from taskmanager.core.config import get_settings
from taskmanager.core.database import SessionLocal
from taskmanager.core.security import get_token_codec
from taskmanager.schemas.auth import RegisterRequest
from taskmanager.schemas.validation import Invalid, validate_payload
from taskmanager.services.auth import AuthService
from taskmanager.services.errors import AuthServiceError
from taskmanager.services.mailer import get_mail_dispatcher
from taskmanager.services.throttle import get_login_throttle

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Task Manager user.")
    parser.add_argument("username", help="Username (3-50 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (6-100 chars)")
    parser.add_argument("role", nargs="?", default="ROLE_USER", help="Role name, e.g. ROLE_ADMIN")
    args = parser.parse_args(argv)

    result = validate_payload(
        RegisterRequest,
        {
            "username": args.username,
            "email": args.email,
            "password": args.password,
            "roles": [{"name": args.role}],
        },
    )
    if isinstance(result, Invalid):
        print(f"Invalid input: {result.message}", file=sys.stderr)
        return 1
    req = result.value

    db = SessionLocal()
    try:
        auth = AuthService.for_session(
            db, get_login_throttle(), get_token_codec(), get_mail_dispatcher(), get_settings()
        )
        user = auth.register(req.username, req.email, req.password, req.roles)
        roles = ", ".join(r.name for r in user.roles) or "none"
        print(f"Created user '{user.username}' <{user.email}> with roles: {roles}.")
        return 0
    except AuthServiceError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
