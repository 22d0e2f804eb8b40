from fastapi import APIRouter, Depends

from mediavault.routers.deps import get_credential_store
from mediavault.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from mediavault.services import auth as auth_service
from mediavault.store.users import CredentialStore

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register", response_model=AuthResponse)
def register(payload: RegisterRequest, users: CredentialStore = Depends(get_credential_store)) -> AuthResponse:
    return auth_service.register(users, payload.email, payload.password)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, users: CredentialStore = Depends(get_credential_store)) -> AuthResponse:
    return auth_service.login(users, payload.email, payload.password)
