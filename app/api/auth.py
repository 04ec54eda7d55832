from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from jose import JWTError, jwt
from datetime import datetime, timezone, timedelta
from typing import Optional
import uuid
import bcrypt

from app.database import SessionDep
from app.models.user import Guardian, GuardianCreate, GuardianRead, LoginRequest, TokenResponse
from app.config import Settings
from app.core.exceptions import AuthError, ValidationError

router = APIRouter()
security = HTTPBearer(auto_error=False)

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))

def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt

async def get_current_guardian(
    db: SessionDep,
    settings: Settings = Depends(get_settings),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Guardian:
    if credentials is None:
        raise AuthError("Access token required")

    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        guardian_id = uuid.UUID(payload.get("sub", ""))
    except (JWTError, ValueError, TypeError):
        raise AuthError("Could not validate credentials")

    guardian = await db.get(Guardian, guardian_id)
    if guardian is None:
        raise AuthError("Could not validate credentials")

    return guardian

def _token_response(message: str, guardian: Guardian, settings: Settings) -> TokenResponse:
    access_token = create_access_token(data={"sub": str(guardian.id)}, settings=settings)
    return TokenResponse(
        message=message,
        access_token=access_token,
        guardian=GuardianRead.model_validate(guardian)
    )

@router.post("/register", response_model=TokenResponse)
async def register(
    guardian_data: GuardianCreate,
    db: SessionDep,
    settings: Settings = Depends(get_settings)
):
    guardian = Guardian(
        email=guardian_data.email.lower(),
        name=guardian_data.name,
        password_hash=hash_password(guardian_data.password)
    )

    db.add(guardian)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ValidationError("Email already exists")
    await db.refresh(guardian)

    return _token_response("Registration successful", guardian, settings)

@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    db: SessionDep,
    settings: Settings = Depends(get_settings)
):
    result = await db.execute(select(Guardian).where(Guardian.email == credentials.email.lower()))
    guardian = result.scalar_one_or_none()

    if guardian is None or not verify_password(credentials.password, guardian.password_hash):
        raise ValidationError("Invalid credentials")

    return _token_response("Login successful", guardian, settings)

@router.get("/me", response_model=GuardianRead)
async def get_me(
    current_guardian: Guardian = Depends(get_current_guardian)
):
    return current_guardian
