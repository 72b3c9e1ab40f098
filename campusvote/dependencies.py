from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from campusvote.database.connection import get_database
from campusvote.errors import Forbidden, Unauthorized, ValidationError
from campusvote.security import Identity, decode_access_token
from campusvote.storage_mongo import MongoStorage

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache(maxsize=1)
def get_storage() -> MongoStorage:
    return MongoStorage(get_database())


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    storage: MongoStorage = Depends(get_storage),
) -> Identity:
    if credentials is None:
        raise Unauthorized("Not authorized, no token")
    payload = decode_access_token(credentials.credentials)
    # role comes from the stored user so a demoted account loses access at once
    try:
        user = storage.users.get(payload["sub"])
    except ValidationError:
        raise Unauthorized("Invalid token")
    if not user:
        raise Unauthorized("Not authorized, user not found")
    return Identity(user_id=user["_id"], role=user["role"])


def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    if not identity.is_admin:
        raise Forbidden("Not authorized as an admin")
    return identity
