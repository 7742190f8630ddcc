# dependencies.py
"""
Shared FastAPI dependencies: bearer-token check, role gate and the mapping
from service-layer errors to HTTP errors.
"""
import os
from typing import Iterable

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from dotenv import load_dotenv

from services.errors import Conflict, NotFound, ServiceError, ValidationFailed

# Load .env
load_dotenv()
SECRET_KEY = os.getenv("JWT_SECRET")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

ADMIN_ROLES = ("admin", "superadmin")


# Token Auth Dependency
def verify_token(request: Request) -> dict:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
     token = auth.split(" ", 1)[1]
     try:
          payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
          return payload
     except JWTError:
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")


def require_roles(roles: Iterable[str]):
     allowed = tuple(roles)

     def dependency(token: dict = Depends(verify_token)) -> dict:
          if token.get("role") not in allowed:
               raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="You do not have permission to perform this action"
               )
          return token

     return dependency


require_admin = require_roles(ADMIN_ROLES)


def to_http_exception(exc: ServiceError) -> HTTPException:
     """Translate a service-layer error into the HTTP error returned to the client."""
     if isinstance(exc, ValidationFailed):
          return HTTPException(
               status_code=422,
               detail={"message": exc.message, "errors": exc.errors},
          )
     if isinstance(exc, NotFound):
          return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
     if isinstance(exc, Conflict):
          return HTTPException(status_code=422, detail=exc.message)
     return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
