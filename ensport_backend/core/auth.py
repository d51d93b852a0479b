# ensport_backend/core/auth.py
# Login/logout routes and the dependencies that turn a bearer token into an Operator

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ensport_backend.core.database import get_db
from ensport_backend.core.rate_limit import rate_limit
from ensport_backend.core.security import Operator, create_session_token, read_session_token
from ensport_backend.models.activity_log_model import ActivityAction
from ensport_backend.models.user_model import User, UserRole, LoginRequest, UserRead
from ensport_backend.services.activity_logger import log_operator_activity
from ensport_backend.services.user_service import authenticate

logger = logging.getLogger(__name__)

router = APIRouter()
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


# ---------------------------------------------
# Dependencies
# ---------------------------------------------

async def get_current_operator(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Operator:
    """Resolve the bearer token. Deleted or suspended users invalidate their tokens."""
    if credentials is None:
        raise _unauthorized()

    user_id = read_session_token(credentials.credentials)
    if user_id is None:
        raise _unauthorized("Invalid or expired session")

    user = await db.get(User, user_id)
    if not user or not user.is_active:
        raise _unauthorized("Invalid or expired session")
    return Operator.from_user(user)


async def get_optional_operator(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[Operator]:
    """Like get_current_operator, but anonymous callers get None instead of a 401."""
    if credentials is None:
        return None
    return await get_current_operator(credentials, db)


def require_roles(*roles: UserRole):
    """Dependency factory: 403 unless the operator holds one of `roles`."""
    async def dependency(operator: Operator = Depends(get_current_operator)) -> Operator:
        if operator.role not in roles:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return operator
    return dependency


require_admin = require_roles(UserRole.ADMIN)


# ---------------------------------------------
# Routes
# ---------------------------------------------

@router.post("/login", dependencies=[Depends(rate_limit("auth"))])
async def login(payload: LoginRequest, request: Request, db: AsyncSession = Depends(get_db)):
    user = await authenticate(db, payload.username, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid username or password")
    if not user.is_active:
        raise HTTPException(status_code=401, detail="Your account has been suspended")

    operator = Operator.from_user(user)
    await log_operator_activity(
        db, operator, ActivityAction.LOGIN, f"{user.username} logged in",
        target_id=user.id, request=request,
    )
    logger.info("User %s logged in", user.username)

    return {
        "token": create_session_token(user.id),
        "token_type": "bearer",
        "user": UserRead.model_validate(user),
    }


@router.post("/logout")
async def logout(request: Request, operator: Operator = Depends(get_current_operator),
                 db: AsyncSession = Depends(get_db)):
    """Tokens are stateless; the client discards it. Only the audit entry is written."""
    await log_operator_activity(
        db, operator, ActivityAction.LOGOUT, f"{operator.username} logged out",
        target_id=operator.id, request=request,
    )
    return {"message": "Logged out"}


@router.get("/me")
async def me(operator: Operator = Depends(get_current_operator), db: AsyncSession = Depends(get_db)):
    user = await db.get(User, operator.id)
    return UserRead.model_validate(user)
