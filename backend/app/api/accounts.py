"""Account API endpoints."""
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.account import (
    ErrorResponse,
    STORE_INT_MAX,
    STORE_INT_MIN,
    PointsUpdate,
    UserEnvelope,
    UserLogin,
    UserPointsEnvelope,
    UserPointsResponse,
    UserRegister,
    UserResponse,
)
from app.services import accounts

router = APIRouter(tags=["accounts"])


@router.post(
    "/register",
    response_model=UserEnvelope,
    responses={400: {"model": ErrorResponse}},
)
def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """Register a new user."""
    user = accounts.register_user(
        db,
        email=user_data.email,
        username=user_data.username,
        password=user_data.password,
    )
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=UserEnvelope,
    responses={401: {"model": ErrorResponse}},
)
def login(user_data: UserLogin, db: Session = Depends(get_db)):
    """Check credentials and return the user."""
    user = accounts.authenticate_user(db, user_data.username, user_data.password)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.post(
    "/add-points",
    response_model=UserPointsEnvelope,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def add_points(update: PointsUpdate, db: Session = Depends(get_db)):
    """Add a signed delta to a user's point balance."""
    row = accounts.add_points(db, update.user_id, update.points)
    return UserPointsEnvelope(user=UserPointsResponse.model_validate(row))


@router.get(
    "/user/{user_id}",
    response_model=UserEnvelope,
    responses={404: {"model": ErrorResponse}},
)
def get_user(
    user_id: int = Path(..., ge=STORE_INT_MIN, le=STORE_INT_MAX),
    db: Session = Depends(get_db),
):
    """Get a user by id."""
    user = accounts.get_user(db, user_id)
    return UserEnvelope(user=UserResponse.model_validate(user))
