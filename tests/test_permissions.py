from datetime import timedelta

import pytest

from campusconnect.core.exceptions import AuthorizationError
from campusconnect.utils.permissions import (
    Role,
    can_download_resume,
    can_view_notice,
    can_view_resume,
    has_permission,
    is_owner_or_admin,
    require_roles,
)
from campusconnect.utils.timeutils import isoformat, utcnow

STUDENT = {"id": "s1", "role": "student"}
OTHER_STUDENT = {"id": "s2", "role": "student"}
FACULTY = {"id": "f1", "role": "faculty"}
ADMIN = {"id": "a1", "role": "admin"}


def test_role_levels_are_ordered():
    assert Role.STUDENT.level < Role.FACULTY.level < Role.ADMIN.level
    assert has_permission(ADMIN, "faculty")
    assert has_permission(FACULTY, "faculty")
    assert not has_permission(STUDENT, "faculty")
    assert not has_permission({"id": "x", "role": "janitor"}, "student")


def test_require_roles():
    require_roles(FACULTY, Role.FACULTY, Role.ADMIN)
    with pytest.raises(AuthorizationError):
        require_roles(STUDENT, Role.FACULTY, Role.ADMIN)


def test_owner_or_admin_uses_embedded_snapshot():
    notice = {"author": {"id": "f1", "name": "Prof", "role": "faculty"}}
    material = {"uploadedBy": {"id": "f1", "name": "Prof", "role": "faculty"}}

    assert is_owner_or_admin(FACULTY, notice)
    assert is_owner_or_admin(FACULTY, material)
    assert is_owner_or_admin(ADMIN, notice)
    assert not is_owner_or_admin({"id": "f2", "role": "faculty"}, notice)


def test_notice_audience_rules():
    now = utcnow()
    faculty_only = {"author": {"id": "f9"}, "targetAudience": "faculty"}
    students_only = {"author": {"id": "f9"}, "targetAudience": "students"}

    assert not can_view_notice(STUDENT, faculty_only, now)
    assert can_view_notice(FACULTY, faculty_only, now)
    assert can_view_notice(ADMIN, faculty_only, now)
    assert can_view_notice(STUDENT, students_only, now)
    assert not can_view_notice(FACULTY, students_only, now)
    # 작성자는 대상과 무관하게 열람 가능
    assert can_view_notice({"id": "f9", "role": "faculty"}, students_only, now)


def test_expired_notice_hidden_for_every_role():
    now = utcnow()
    notice = {
        "author": {"id": "f1"},
        "targetAudience": "all",
        "expiryDate": isoformat(now - timedelta(hours=1)),
    }
    assert not can_view_notice(STUDENT, notice, now)
    assert not can_view_notice(FACULTY, notice, now)
    assert not can_view_notice(ADMIN, notice, now)

    notice["expiryDate"] = isoformat(now + timedelta(hours=1))
    assert can_view_notice(STUDENT, notice, now)


def test_resume_view_and_download_gates():
    private = {"uploadedBy": {"id": "s1"}, "isPublic": False}
    public = {"uploadedBy": {"id": "s1"}, "isPublic": True}

    assert can_view_resume(STUDENT, private)
    assert not can_view_resume(OTHER_STUDENT, private)
    assert can_view_resume(FACULTY, private)
    assert can_view_resume(OTHER_STUDENT, public)

    assert not can_download_resume(OTHER_STUDENT, public)
    assert can_download_resume(STUDENT, public)
    assert can_download_resume(FACULTY, private)
    assert can_download_resume(ADMIN, private)
