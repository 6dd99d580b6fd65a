# campusconnect/services/auth_service.py
"""
Auth Service

Registration, login, token-to-user resolution and profile maintenance, all
backed by the ``users`` collection.
"""
import logging
from typing import Tuple

from campusconnect.core.config import Settings
from campusconnect.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    UserNotFoundError,
)
from campusconnect.core.storage import JsonStore
from campusconnect.models.user import CurrentUser, User
from campusconnect.schemas.user import PasswordChange, ProfileUpdate, UserCreate, UserLogin
from campusconnect.services.base import changes_from, invalid, new_id, validate_payload
from campusconnect.utils.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from campusconnect.utils.timeutils import now_iso

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    collection = "users"

    def __init__(self, store: JsonStore, settings: Settings):
        self.store = store
        self.settings = settings

    def _find_by_email(self, users, email: str):
        email = email.lower()
        return next((u for u in users if str(u.get("email", "")).lower() == email), None)

    def _find_by_id(self, users, user_id: str):
        return next((u for u in users if u.get("id") == user_id), None)

    def register(self, payload: dict) -> Tuple[dict, str]:
        """
        Create an account and return its public projection with a fresh token.

        Raises:
            ValidationError: invalid or missing fields
            AuthorizationError: admin self-registration while disabled
            ConflictError: email already registered (case-insensitive)
        """
        data = validate_payload(UserCreate, payload)
        if data.role == "admin" and not self.settings.ALLOW_ADMIN_REGISTRATION:
            raise AuthorizationError("Admin accounts cannot be self-registered")

        hashed_password = get_password_hash(data.password, self.settings.BCRYPT_ROUNDS)

        with self.store.mutate(self.collection) as users:
            if self._find_by_email(users, data.email):
                logger.warning(f"Registration rejected, email already in use: {data.email}")
                raise ConflictError("User already exists with this email")

            user = User(
                id=new_id(),
                name=data.name,
                email=data.email,
                password=hashed_password,
                role=data.role,
                department=data.department or "",
                semester=data.semester if data.role == "student" else None,
                employeeId=data.employeeId if data.role == "faculty" else None,
                createdAt=now_iso(),
                lastLogin=None,
                isActive=True,
            )
            users.append(user.to_record())

        logger.info(f"User registered: {user.email} ({user.role})")
        return user.public(), create_access_token(user.model_dump(), self.settings)

    def login(self, payload: dict) -> Tuple[dict, str]:
        data = validate_payload(UserLogin, payload)

        with self.store.mutate(self.collection) as users:
            record = self._find_by_email(users, data.email)
            if not record or not verify_password(data.password, record.get("password", "")):
                logger.warning(f"Failed login attempt for email: {data.email}")
                raise AuthenticationError(INVALID_CREDENTIALS)
            if not record.get("isActive", True):
                raise AuthenticationError("Account is deactivated. Please contact administrator.")

            record["lastLogin"] = now_iso()
            user = User.model_validate(record)

        logger.info(f"Successful login for user: {user.email}")
        return user.public(), create_access_token(record, self.settings)

    def resolve_user(self, token: str) -> dict:
        """
        Turn a bearer token into the request identity ``{id, email, name, role}``.

        Raises:
            AuthenticationError: no token
            InvalidTokenError / ExpiredTokenError: token rejected
            UserNotFoundError: the account behind the token no longer exists
        """
        if not token:
            raise AuthenticationError()
        claims = decode_access_token(token, self.settings)

        record = self._find_by_id(self.store.load_all(self.collection), claims["id"])
        if record is None:
            raise UserNotFoundError()

        return CurrentUser(
            id=record["id"],
            email=record["email"],
            name=record["name"],
            role=record["role"],
        ).model_dump()

    def get_profile(self, user_id: str) -> dict:
        record = self._find_by_id(self.store.load_all(self.collection), user_id)
        if record is None:
            raise NotFoundError("User not found")
        return User.model_validate(record).public()

    def update_profile(self, user_id: str, payload: dict) -> dict:
        data = validate_payload(ProfileUpdate, payload)
        changes = changes_from(data)

        with self.store.mutate(self.collection) as users:
            record = self._find_by_id(users, user_id)
            if record is None:
                raise NotFoundError("User not found")

            # 역할에 맞지 않는 필드는 무시
            if record["role"] != "student":
                changes.pop("semester", None)
            if record["role"] != "faculty":
                changes.pop("employeeId", None)

            record.update(changes)
            user = User.model_validate(record)

        logger.info(f"Profile updated for user: {user.email}")
        return user.public()

    def change_password(self, user_id: str, payload: dict) -> None:
        data = validate_payload(PasswordChange, payload)

        with self.store.mutate(self.collection) as users:
            record = self._find_by_id(users, user_id)
            if record is None:
                raise NotFoundError("User not found")
            if not verify_password(data.currentPassword, record.get("password", "")):
                raise invalid("currentPassword", "Current password is incorrect")

            record["password"] = get_password_hash(data.newPassword, self.settings.BCRYPT_ROUNDS)

        logger.info(f"Password changed for user: {record['email']}")
