import logging

from fastapi import APIRouter, Depends, HTTPException

from invoicepro.api.deps import get_auth_service
from invoicepro.models.user import LoginRequest, User
from invoicepro.services.auth_service import AuthService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=User)
async def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """Check credentials and return the user record (without password). No session is created."""
    try:
        user = service.authenticate(payload.username, payload.password)
    except Exception as exc:
        logger.error(f"Login failed: {exc}")
        raise HTTPException(status_code=500, detail="Login failed")
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return user
