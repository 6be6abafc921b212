from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.config import settings
from app.core.security import decode_jwt

bearer = HTTPBearer(auto_error=False)

ROLE_ADMIN = "ADMIN"
PLAN_EDITOR_ROLES = ("ADMIN", "MANAGER", "FOREMAN")

def get_current_user(creds: HTTPAuthorizationCredentials = Depends(bearer)) -> dict:
    if not creds:
        raise HTTPException(status_code=401, detail="Unauthorized")
    try:
        claims = decode_jwt(creds.credentials, settings.JWT_SECRET)
    except Exception:
        raise HTTPException(status_code=401, detail="Unauthorized")
    if not claims.get("userId"):
        raise HTTPException(status_code=401, detail="Unauthorized")
    if not claims.get("isActive"):
        raise HTTPException(status_code=403, detail="User is inactive")
    return claims

def require_role(*roles: str):
    def _inner(user: dict = Depends(get_current_user)) -> dict:
        if user.get("role") not in roles:
            raise HTTPException(status_code=403, detail="Forbidden: Insufficient permissions")
        return user
    return _inner
