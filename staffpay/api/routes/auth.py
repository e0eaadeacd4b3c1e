"""
Authentication Dependencies
Bearer tokens are issued by the CRM auth service; this service only verifies them
"""
from fastapi import HTTPException, Depends, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from jose import JWTError, jwt
from typing import Optional

from staffpay.config import settings


# OAuth2 scheme (token endpoint lives in the auth service)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/admin/login")


class TokenData(BaseModel):
    """Token payload data"""
    sub: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


def decode_access_token(token: str) -> TokenData:
    """Decode and validate a JWT access token"""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    return TokenData(**{key: payload.get(key) for key in ("sub", "email", "role")})


async def get_current_admin(token: str = Depends(oauth2_scheme)) -> TokenData:
    """Get the authenticated admin from the bearer token"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        token_data = decode_access_token(token)
    except JWTError:
        raise credentials_exception

    if token_data.sub is None:
        raise credentials_exception

    if token_data.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")

    return token_data
