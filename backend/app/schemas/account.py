"""Account schemas."""
from pydantic import BaseModel, ConfigDict, Field

# Range of the store's INTEGER columns
STORE_INT_MIN = -(2**31)
STORE_INT_MAX = 2**31 - 1


class UserRegister(BaseModel):
    """User registration request."""

    email: str
    username: str
    password: str


class UserLogin(BaseModel):
    """User login request."""

    username: str
    password: str


class PointsUpdate(BaseModel):
    """Signed point delta for a user."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(..., alias="userId", ge=STORE_INT_MIN, le=STORE_INT_MAX)
    points: int = Field(..., ge=STORE_INT_MIN, le=STORE_INT_MAX)


class UserResponse(BaseModel):
    """Public user info. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    username: str
    points: int


class UserPointsResponse(BaseModel):
    """User info returned after a points update."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    points: int


class UserEnvelope(BaseModel):
    success: bool = True
    user: UserResponse


class UserPointsEnvelope(BaseModel):
    success: bool = True
    user: UserPointsResponse


class ErrorResponse(BaseModel):
    """Error envelope shared by every failing endpoint."""

    success: bool = False
    message: str
