from pydantic import BaseModel


class RegisterRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class UserPublic(BaseModel):
    id: str
    email: str


class AuthResponse(BaseModel):
    token: str
    user: UserPublic
