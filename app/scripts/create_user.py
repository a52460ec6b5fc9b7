"""
Create an admin account in the users file. Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [--email EMAIL]
Example:
  python -m app.scripts.create_user editor your-secure-password --email me@example.com
"""
import argparse
import sys

from app.core.config import get_settings
from app.core.logging_config import configure_logging
from app.services.credential_store import CredentialStore, DuplicateUserError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a CMS user (no registration UI).")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("--email", default="", help="Contact email for the account")
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory holding users.json (defaults to DATA_DIR setting)",
    )
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > 255:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if len(args.password) < 8 or len(args.password) > 128:
        print("Password must be 8-128 characters.", file=sys.stderr)
        return 1

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    store = CredentialStore(args.data_dir or settings.DATA_DIR)
    try:
        store.add_user(username, args.password, email=args.email, role="admin")
    except DuplicateUserError as e:
        print(e.message, file=sys.stderr)
        return 1
    print(f"Created user '{username}' with role 'admin'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
