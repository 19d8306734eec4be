"""Create (or promote) an administrator account.

Usage: learnhub-create-admin [--email E] [--name N]

Missing values are prompted for; the password is always read without echo.
An existing credential for the email is reused and its profile promoted.
"""

import argparse
import asyncio
import getpass
import logging
import sys

from learnhub.auth.service import AuthService
from learnhub.config import get_settings
from learnhub.database import close_db, get_session, init_db
from learnhub.dependencies import declared_indexes
from learnhub.errors import ValidationError
from learnhub.store import DocumentStore, SqlDocumentStore
from learnhub.users.service import UserService

logger = logging.getLogger("learnhub-create-admin")

MIN_PASSWORD_LENGTH = 6


async def create_admin(store: DocumentStore, email: str, password: str, name: str) -> str:
    """Create or reuse the credential for ``email`` and give its user the admin role."""
    if not email or not password or not name:
        raise ValidationError("Email, password and name are all required")
    if len(password) < MIN_PASSWORD_LENGTH:
        msg = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        raise ValidationError(msg)

    auth = AuthService(store)
    users = UserService(store)
    credential = await auth.get_credential(email)
    if credential is not None:
        user_id = credential.user_id
        logger.info("Email already registered, reusing user %s", user_id)
    else:
        user_id = await users.create_profile(name, email.lower().strip(), role="admin")
        await auth.create_credential(email, password, user_id)
        logger.info("Credential created for user %s", user_id)

    await users.upsert_admin(user_id, name, email.lower().strip())
    await store.commit()
    return user_id


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a LearnHub administrator")
    parser.add_argument("--email", help="Admin email")
    parser.add_argument("--name", help="Full name")
    parser.add_argument("--database-url", help="Overrides LEARNHUB_DATABASE_URL")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    email = args.email or input("Admin email: ").strip()
    password = getpass.getpass(f"Password (min {MIN_PASSWORD_LENGTH} characters): ")
    name = args.name or input("Full name: ").strip()

    await init_db(args.database_url or settings.database_url, create_schema=settings.create_schema)
    try:
        async for session in get_session():
            store = SqlDocumentStore(session, settings.project_id, declared_indexes())
            try:
                user_id = await create_admin(store, email, password, name)
            except ValidationError as e:
                logger.error("%s", e.detail)
                return 1
            logger.info("Admin ready: %s (%s)", email, user_id)
    finally:
        await close_db()
    return 0


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    sys.exit(asyncio.run(run(parse_args())))


if __name__ == "__main__":
    main()
