# dependencies.py
"""
Shared FastAPI dependencies: bearer-token authentication and role checks.

Tokens are HS256 JWTs whose payload carries the caller's ``id`` and ``role``.
"""
from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt

from config import JWT_ALGORITHM, JWT_SECRET


def verify_token(request: Request) -> dict:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=401, detail="Missing token")
     token = auth.split(" ")[1]
     try:
          payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
     except JWTError:
          raise HTTPException(status_code=403, detail="Invalid token")
     if not payload.get("id"):
          raise HTTPException(status_code=403, detail="Invalid token")
     payload["id"] = str(payload["id"])
     return payload


def require_admin(token: dict = Depends(verify_token)) -> dict:
     if token.get("role") != "admin":
          raise HTTPException(
               status_code=status.HTTP_403_FORBIDDEN,
               detail="Admin access required"
          )
     return token


def ensure_self_or_admin(token: dict, user_id: str) -> None:
     """Raise 403 unless the caller is ``user_id`` or an admin."""
     if token.get("role") != "admin" and token.get("id") != str(user_id):
          raise HTTPException(
               status_code=status.HTTP_403_FORBIDDEN,
               detail="You do not have permission to access this resource"
          )
