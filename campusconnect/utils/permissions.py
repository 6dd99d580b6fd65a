# campusconnect/utils/permissions.py
"""
Role hierarchy and ownership rules shared by every resource service.

Ownership is decided from the identity snapshot embedded in the record at
creation time (``author`` or ``uploadedBy``), never from a live user lookup.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from campusconnect.core.exceptions import AuthorizationError
from campusconnect.utils.timeutils import parse_datetime


class Role(str, Enum):
    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"

    @property
    def level(self) -> int:
        return ROLE_LEVELS[self]


ROLE_LEVELS = {
    Role.STUDENT: 1,
    Role.FACULTY: 2,
    Role.ADMIN: 3,
}

# 공지 대상 → 해당 역할
AUDIENCE_ROLES = {
    "students": Role.STUDENT,
    "faculty": Role.FACULTY,
}


def _role_of(user) -> Optional[Role]:
    try:
        return Role(user["role"])
    except (KeyError, ValueError):
        return None


def has_permission(user, required_role) -> bool:
    role = _role_of(user)
    if role is None:
        return False
    return role.level >= Role(required_role).level


def is_admin(user) -> bool:
    return _role_of(user) is Role.ADMIN


def owner_id(resource: dict) -> Optional[str]:
    snapshot = resource.get("author") or resource.get("uploadedBy") or {}
    return snapshot.get("id")


def is_owner(user, resource: dict) -> bool:
    return owner_id(resource) is not None and owner_id(resource) == user["id"]


def is_owner_or_admin(user, resource: dict) -> bool:
    return is_owner(user, resource) or is_admin(user)


def require_roles(user, *roles) -> None:
    allowed = {Role(role) for role in roles}
    if _role_of(user) not in allowed:
        raise AuthorizationError()


def audience_matches(user, target_audience: str) -> bool:
    if target_audience == "all":
        return True
    return AUDIENCE_ROLES.get(target_audience) is _role_of(user)


def is_expired(notice: dict, now: datetime, timezone: str = "UTC") -> bool:
    expiry = parse_datetime(notice.get("expiryDate"), timezone)
    return expiry is not None and expiry < now


def can_view_notice(user, notice: dict, now: datetime, timezone: str = "UTC") -> bool:
    # 만료된 공지는 역할과 무관하게 숨김
    if is_expired(notice, now, timezone):
        return False
    if is_admin(user) or is_owner(user, notice):
        return True
    return audience_matches(user, notice.get("targetAudience", "all"))


def can_view_resume(user, resume: dict) -> bool:
    return bool(resume.get("isPublic")) or can_download_resume(user, resume)


def can_download_resume(user, resume: dict) -> bool:
    return is_owner(user, resume) or has_permission(user, Role.FACULTY)
