"""Account registration, authentication and point balance operations.

Every function takes the request's SQLAlchemy session and either returns the
affected user or raises an ``AccountServiceError`` subclass. Each error carries
the HTTP status and the client-safe message it maps to, so the API layer never
has to inspect driver exceptions.
"""
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.user import User
from app.services.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


class AccountServiceError(Exception):
    """Base class for failures surfaced to API clients."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ConflictOrValidationError(AccountServiceError):
    """Duplicate email/username or a field the store rejected."""

    status_code = 400
    message = "Email or username already exists"


ValidationOrConflictError = ConflictOrValidationError


class AuthenticationError(AccountServiceError):
    """Unknown username or wrong password. Deliberately indistinguishable."""

    status_code = 401
    message = "Invalid username or password"


class NotFoundError(AccountServiceError):
    status_code = 404
    message = "User not found"


class UnexpectedStoreError(AccountServiceError):
    status_code = 500


MAX_PASSWORD_BYTES = 72


def _check_password(password: str) -> None:
    try:
        encoded = password.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ConflictOrValidationError("Invalid password") from e

    # bcrypt refuses passwords longer than 72 bytes
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ConflictOrValidationError("Password is too long")


def register_user(db: Session, email: str, username: str, password: str) -> User:
    """Create a user with a bcrypt-hashed password and a zero balance."""
    _check_password(password)
    password_hash = hash_password(password, rounds=get_settings().bcrypt_rounds)

    user = User(email=email, username=username, password_hash=password_hash)
    try:
        db.add(user)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info(f"Registration rejected for username {username!r}: {e.orig}")
        raise ConflictOrValidationError() from e
    except ValueError as e:
        # The driver could not bind a value, e.g. a lone surrogate
        db.rollback()
        logger.info(f"Registration rejected for username {username!r}: {e}")
        raise ConflictOrValidationError("Invalid email or username") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error registering user {username!r}")
        raise UnexpectedStoreError() from e

    db.refresh(user)
    logger.info(f"Registered user {user.id} ({username!r})")
    return user


def authenticate_user(db: Session, username: str, password: str) -> User:
    """Return the user whose credentials match, else raise AuthenticationError."""
    try:
        user = db.query(User).filter(User.username == username).first()
    except ValueError:
        # Not storable, so no such user
        db.rollback()
        user = None
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Error looking up user {username!r}")
        raise UnexpectedStoreError() from e

    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login for username {username!r}")
        raise AuthenticationError()

    return user


def add_points(db: Session, user_id: int, delta: int):
    """Atomically apply ``points = points + delta`` and return the new balance.

    The increment is a single UPDATE, so concurrent calls for the same user
    serialize on the row inside the store. Negative deltas are allowed and the
    balance has no floor.
    """
    try:
        updated = (
            db.query(User)
            .filter(User.id == user_id)
            .update({User.points: User.points + delta}, synchronize_session=False)
        )
        if not updated:
            db.rollback()
            raise NotFoundError()

        # Same transaction: the row lock is still held, so this sees our write
        row = (
            db.query(User.id, User.username, User.points)
            .filter(User.id == user_id)
            .one()
        )
        db.commit()
    except (SQLAlchemyError, ValueError, OverflowError) as e:
        db.rollback()
        logger.exception(f"Error adding {delta} points to user {user_id}")
        raise UnexpectedStoreError() from e

    logger.debug(f"User {user_id} points {delta:+d} -> {row.points}")
    return row


def get_user(db: Session, user_id: int) -> User:
    try:
        user = db.query(User).filter(User.id == user_id).first()
    except (SQLAlchemyError, ValueError, OverflowError) as e:
        db.rollback()
        logger.exception(f"Error retrieving user {user_id}")
        raise UnexpectedStoreError() from e

    if user is None:
        raise NotFoundError()
    return user
