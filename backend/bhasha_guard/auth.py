from __future__ import annotations
import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from .settings import settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class Admin(BaseModel):
	email: str


def decode_token(token: str) -> dict:
	return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])


def require_admin(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Admin:
	credentials_exception = HTTPException(status_code=401, detail="Could not validate credentials", headers={"WWW-Authenticate": "Bearer"})
	if credentials is None:
		raise credentials_exception
	try:
		payload = decode_token(credentials.credentials)
	except JWTError:
		raise credentials_exception
	email: str | None = payload.get("email")
	if email is None:
		raise credentials_exception
	# Exact match only; no case folding or domain wildcards
	if not settings.admin_email or email != settings.admin_email:
		logger.warning("Rejected admin request from %s", email)
		raise HTTPException(status_code=403, detail="Admin access required")
	return Admin(email=email)
