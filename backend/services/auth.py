from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from config import settings
from database import Database, get_database
from models.user import UserResponse

# JWT token scheme; auto_error off so anonymous callers reach get_optional_user
security = HTTPBearer(auto_error=False)

def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    return encoded_jwt

def decode_user_id(token: str) -> Optional[str]:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    return payload.get("sub")

async def resolve_user(token: Optional[str], db: Database) -> Optional[UserResponse]:
    """Resolve a bearer token to a stored user, None when either is invalid"""
    if not token:
        return None
    user_id = decode_user_id(token)
    if user_id is None:
        return None

    user_data = await db.get_user_by_id(user_id)
    if not user_data:
        return None
    return UserResponse(**user_data)

async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Database = Depends(get_database),
) -> Optional[UserResponse]:
    token = credentials.credentials if credentials else None
    try:
        return await resolve_user(token, db)
    except Exception as e:
        print(f"Error resolving current user: {e}")
        return None

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Database = Depends(get_database),
) -> UserResponse:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user = await resolve_user(credentials.credentials if credentials else None, db)
    if user is None:
        raise credentials_exception
    return user
