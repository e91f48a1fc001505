import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from ..dependencies import get_account_repository
from ..models.profile import UserRole
from ..repositories.accounts import AccountRepository
from .config import settings
from .errors import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentAccount:
    account_id: str
    role: UserRole
    is_premium: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the account id carried by a valid token."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT decode error: {str(e)}")
        raise AuthenticationError("Invalid or expired token")

    account_id = payload.get("sub")
    if not account_id:
        logger.warning("Token missing 'sub' claim")
        raise AuthenticationError("Invalid or expired token")
    return account_id


async def get_current_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    accounts: AccountRepository = Depends(get_account_repository),
) -> CurrentAccount:
    """Resolve the bearer token to an active account."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")

    account_id = decode_access_token(credentials.credentials)
    account = await accounts.get_account(account_id)
    if not account:
        logger.warning(f"Token for unknown account {account_id}")
        raise AuthenticationError("User not found")
    if account.is_blocked:
        raise AuthorizationError("Account has been blocked")

    return CurrentAccount(account_id=account.id, role=account.role, is_premium=account.is_premium)


async def require_admin(current: CurrentAccount = Depends(get_current_account)) -> CurrentAccount:
    if not current.is_admin:
        raise AuthorizationError("Admin access required")
    return current
