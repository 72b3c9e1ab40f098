"""Create an administrator account, or promote an existing user to admin.

Signup through the API only ever creates students, so the first admin has to
be made from the command line.
"""
import argparse
import getpass
import logging
import sys
from typing import List, Optional

from campusvote.dependencies import get_storage
from campusvote.errors import VotingError
from campusvote.security import ROLE_ADMIN, hash_password
from campusvote.storage_mongo import MongoStorage

logger = logging.getLogger(__name__)

argparser = argparse.ArgumentParser(description=__doc__)
argparser.add_argument("email", help="login email of the admin")
argparser.add_argument("--name", default="Administrator", help="display name for a new account")
argparser.add_argument(
    "--password",
    help="password for a new account (prompted for when omitted)",
)


def create_or_promote_admin(storage: MongoStorage, email: str, name: str, password: Optional[str]) -> dict:
    email = email.lower()
    existing = storage.users.get_by_email(email)
    if existing:
        if existing["role"] != ROLE_ADMIN:
            existing = storage.users.update(existing["_id"], {"role": ROLE_ADMIN})
            logger.info(f"Promoted {email} to admin")
        return existing
    if not password:
        raise VotingError("A password is required to create a new admin")
    created = storage.users.create(
        {
            "name": name,
            "email": email,
            "hashed_password": hash_password(password),
            "role": ROLE_ADMIN,
        }
    )
    logger.info(f"Created admin {email}")
    return created


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = argparser.parse_args(argv)
    storage = get_storage()
    password = args.password
    if not password and not storage.users.get_by_email(args.email):
        password = getpass.getpass("Password: ")
    try:
        admin = create_or_promote_admin(storage, args.email, args.name, password)
    except VotingError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    print(f"Admin ready: {admin['email']} ({admin['_id']})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
