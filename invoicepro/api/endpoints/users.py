import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from invoicepro.api.deps import get_auth_service
from invoicepro.core.exceptions import DuplicateRecordError, RecordNotFoundError
from invoicepro.models.invoice import MessageResponse
from invoicepro.models.user import User, UserCreate, UserUpdate
from invoicepro.services.auth_service import AuthService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[User])
async def list_users(service: AuthService = Depends(get_auth_service)):
    try:
        return service.list_users()
    except Exception as exc:
        logger.error(f"Error fetching users: {exc}")
        raise HTTPException(status_code=500, detail="Failed to fetch users")


@router.post("", response_model=User, status_code=201)
async def create_user(payload: UserCreate, service: AuthService = Depends(get_auth_service)):
    try:
        return service.create_user(payload)
    except DuplicateRecordError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.error(f"Error creating user: {exc}")
        raise HTTPException(status_code=400, detail="Failed to create user")


@router.get("/{user_id}", response_model=User)
async def get_user(user_id: str, service: AuthService = Depends(get_auth_service)):
    user = service.repos.users.get(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.put("/{user_id}", response_model=User)
async def update_user(user_id: str, payload: UserUpdate, service: AuthService = Depends(get_auth_service)):
    try:
        return service.update_user(user_id, payload)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    except DuplicateRecordError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.error(f"Error updating user {user_id}: {exc}")
        raise HTTPException(status_code=400, detail="Failed to update user")


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: str, service: AuthService = Depends(get_auth_service)):
    try:
        deleted = service.repos.users.delete(user_id)
    except Exception as exc:
        logger.error(f"Error deleting user {user_id}: {exc}")
        raise HTTPException(status_code=500, detail="Failed to delete user")
    if not deleted:
        raise HTTPException(status_code=404, detail="User not found")
    return MessageResponse(message="User deleted successfully")
