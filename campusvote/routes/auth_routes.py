from fastapi import APIRouter, Depends

from campusvote import crud
from campusvote.dependencies import get_current_identity, get_storage
from campusvote.errors import Unauthorized
from campusvote.schemas import AuthResponse, LoginRequest, SignupRequest, UserOut
from campusvote.security import Identity, create_access_token
from campusvote.storage_mongo import MongoStorage

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _with_token(user: dict) -> dict:
    token = create_access_token({"sub": user["_id"], "role": user["role"]})
    return {**user, "token": token}


@router.post("/signup", response_model=AuthResponse, status_code=201)
def signup(data: SignupRequest, storage: MongoStorage = Depends(get_storage)):
    user = crud.create_user(storage, data)
    return _with_token(user)


@router.post("/login", response_model=AuthResponse)
def login(data: LoginRequest, storage: MongoStorage = Depends(get_storage)):
    user = crud.authenticate_user(storage, data.email, data.password)
    return _with_token(user)


@router.get("/me", response_model=UserOut)
def me(
    identity: Identity = Depends(get_current_identity),
    storage: MongoStorage = Depends(get_storage),
):
    user = storage.users.get(identity.user_id)
    if not user:
        raise Unauthorized("Not authorized, user not found")
    return crud.public_user(user)
