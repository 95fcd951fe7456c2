"""Bearer token decoding and internal shared-secret checks."""
import hmac
from typing import Optional

from fastapi import Depends, Header, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from resume_assets.core.config import Settings, get_settings

security = HTTPBearer(auto_error=False)


def decode_user_id(token: str, settings: Settings) -> int:
    """Return the user id carried in the ``sub`` claim of ``token``."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized") from exc

    subject = payload.get("sub")
    try:
        user_id = int(str(subject))
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized") from exc
    if user_id <= 0:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")
    return user_id


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> int:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")
    return decode_user_id(credentials.credentials, settings)


async def require_internal_secret(
    x_internal_secret: Optional[str] = Header(default=None),
    token: Optional[str] = Query(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Admit the render worker by shared secret (header, or ``token`` query)."""
    secret = settings.internal_api_secret.strip()
    if not secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="internal api secret is not configured",
        )
    presented = (x_internal_secret or token or "").strip()
    if not presented or not hmac.compare_digest(presented.encode("utf-8"), secret.encode("utf-8")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")
