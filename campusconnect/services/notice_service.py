# campusconnect/services/notice_service.py
import logging
from typing import Optional

from campusconnect.core.exceptions import AuthorizationError
from campusconnect.models.notice import Notice
from campusconnect.schemas.notice import NoticeCreate, NoticeUpdate
from campusconnect.services.base import (
    ResourceService,
    author_snapshot,
    changes_from,
    contains,
    invalid,
    new_id,
    paginate,
    validate_payload,
)
from campusconnect.utils.permissions import Role, can_view_notice, is_owner_or_admin, require_roles
from campusconnect.utils.timeutils import isoformat, localize, sort_key

logger = logging.getLogger(__name__)


class NoticeService(ResourceService):
    collection = "notices"
    label = "Notice"
    default_limit = 50

    def _expiry(self, value) -> Optional[str]:
        if value is None:
            return None
        expiry = localize(value, self.settings.TIMEZONE)
        if expiry <= self.now():
            raise invalid("expiryDate", "expiryDate must be in the future")
        return isoformat(expiry)

    def _visible(self, user, notice: dict) -> bool:
        return can_view_notice(user, notice, self.now(), self.settings.TIMEZONE)

    def list(self, user, category: Optional[str] = None, department: Optional[str] = None,
             search: Optional[str] = None, page: int = 1, limit: Optional[int] = None):
        notices = [n for n in self.load() if self._visible(user, n)]

        if category:
            notices = [n for n in notices if n.get("category") == category]
        if department:
            # 학과 지정이 없는 공지는 모든 학과에 노출
            notices = [n for n in notices if not n.get("department") or n.get("department") == department]
        if search:
            notices = [n for n in notices if contains(n.get("title"), search) or contains(n.get("content"), search)]

        notices.sort(key=lambda n: sort_key(n.get("createdAt")), reverse=True)
        return paginate(notices, page, limit or self.default_limit)

    def get(self, notice_id: str, user) -> dict:
        notice = self.find(self.load(), notice_id)
        if not self._visible(user, notice):
            raise AuthorizationError("Access denied to this notice")
        return notice

    def create(self, payload: dict, user) -> dict:
        require_roles(user, Role.FACULTY, Role.ADMIN)
        data = validate_payload(NoticeCreate, payload)

        timestamp = self.now_iso()
        notice = Notice(
            id=new_id(),
            title=data.title,
            content=data.content,
            category=data.category,
            targetAudience=data.targetAudience,
            department=data.department or None,
            expiryDate=self._expiry(data.expiryDate),
            author=author_snapshot(user),
            createdAt=timestamp,
            updatedAt=timestamp,
            isActive=True,
        ).model_dump(mode="json")

        with self.store.mutate(self.collection) as notices:
            notices.append(notice)

        logger.info(f"Notice created: {notice['id']} by {user['email']}")
        return notice

    def update(self, notice_id: str, payload: dict, user) -> dict:
        data = validate_payload(NoticeUpdate, payload)
        changes = changes_from(data, nullable=("expiryDate", "department"))
        if "expiryDate" in changes:
            changes["expiryDate"] = self._expiry(data.expiryDate)

        with self.store.mutate(self.collection) as notices:
            notice = self.find(notices, notice_id)
            if not is_owner_or_admin(user, notice):
                raise AuthorizationError("Access denied. You can only update your own notices.")

            # id, author, createdAt 은 변경 불가
            notice.update(changes)
            notice["updatedAt"] = self.now_iso()

        logger.info(f"Notice updated: {notice_id} by {user['email']}")
        return notice

    def delete(self, notice_id: str, user) -> None:
        with self.store.mutate(self.collection) as notices:
            index = self.index_of(notices, notice_id)
            if not is_owner_or_admin(user, notices[index]):
                raise AuthorizationError("Access denied. You can only delete your own notices.")
            notices.pop(index)

        logger.info(f"Notice deleted: {notice_id} by {user['email']}")
