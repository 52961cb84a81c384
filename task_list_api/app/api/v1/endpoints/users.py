"""
User endpoints for API v1.

Provide registration, login, the current user's profile and account
deletion.  Deleting an account removes all of its tasks.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from task_list_api.app.core.exceptions import NotFoundError, ValidationError
from task_list_api.app.core.security import create_access_token, get_current_user
from task_list_api.app.schemas.user import Token, UserCreate, UserLogin, UserRead
from task_list_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register_user(user: UserCreate) -> UserRead:
    """Register a new user.

    Responds 422 with field errors if the e‑mail or password is blank
    or the e‑mail is already taken.
    """
    try:
        return await UserService.create_user(user)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"errors": e.errors},
        ) from e


@router.post("/login", response_model=Token)
async def login_user(credentials: UserLogin) -> Token:
    """Exchange e‑mail and password for a bearer token."""
    db_user = await UserService.authenticate(credentials.email, credentials.password)
    if not db_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    return Token(access_token=create_access_token({"sub": db_user.email}))


@router.get("/me", response_model=UserRead)
async def read_current_user(current_user: UserRead = Depends(get_current_user)) -> UserRead:
    """Return the authenticated user."""
    return current_user


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_current_user(current_user: UserRead = Depends(get_current_user)) -> Response:
    """Delete the authenticated user's account and all of their tasks."""
    try:
        await UserService.delete_user(current_user.id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
