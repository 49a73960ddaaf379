# app/core/admin_dependencies.py

from fastapi import HTTPException, status, Request
from jose import JWTError

from app.core.security import decode_access_token
from app.utils.logger import logger

credentials_exception = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Not authenticated",
    headers={"WWW-Authenticate": "Bearer"},
)

forbidden_exception = HTTPException(
    status_code=status.HTTP_403_FORBIDDEN,
    detail="You do not have permission to access this resource",
)


def get_current_user(request: Request) -> dict:
    """
    Admin identity from the Authorization header (Bearer <token>).

    Tokens are issued by the hosted auth platform; only the claims are
    checked here: a subject and role == "admin".
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        logger.warning("[AUTH] Authorization header missing or malformed.")
        raise credentials_exception

    access_token = auth_header.replace("Bearer ", "", 1)

    try:
        payload = decode_access_token(access_token)
    except JWTError as e:
        logger.error(f"[AUTH] Error decoding JWT: {e}")
        raise credentials_exception

    if not payload.get("sub"):
        raise credentials_exception

    if payload.get("role") != "admin":
        logger.warning(
            "[AUTH] Access denied. sub=%s role=%s tried to access an admin route.",
            payload.get("sub"),
            payload.get("role"),
        )
        raise forbidden_exception

    return payload
