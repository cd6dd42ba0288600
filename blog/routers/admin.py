import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel

from blog.core.config import Settings, get_settings
from blog.services.auth import AdminAuthService

logger = logging.getLogger(__name__)

router = APIRouter()

# auto_error is off so a missing token is rejected the same way as a bad one
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="blog/api/admin/login", auto_error=False)


class LoginRequest(BaseModel):
    password: str


class AdminUser(BaseModel):
    role: str


class LoginResponse(BaseModel):
    success: bool
    token: str
    user: AdminUser
    message: str


class VerifyResponse(BaseModel):
    valid: bool
    user: AdminUser


def get_auth_service(settings: Settings = Depends(get_settings)) -> AdminAuthService:
    return AdminAuthService(settings)


def require_admin(
    token: Optional[str] = Depends(oauth2_scheme),
    service: AdminAuthService = Depends(get_auth_service),
) -> dict:
    payload = service.verify_token(token)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


@router.post("/login", response_model=LoginResponse)
def login(data: LoginRequest, service: AdminAuthService = Depends(get_auth_service)):
    token = service.login(data.password)
    if not token:
        logger.warning("Admin login rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
        )

    logger.info("Admin login succeeded")
    return LoginResponse(
        success=True,
        token=token,
        user=AdminUser(role="admin"),
        message="Login successful",
    )


@router.get("/verify", response_model=VerifyResponse)
def verify(payload: dict = Depends(require_admin)):
    """Check that the stored admin token is still good."""
    return VerifyResponse(valid=True, user=AdminUser(role=payload["role"]))
