# campusconnect/services/resume_service.py
"""
Resume Service

Resumes belong to the student who uploaded them. Private resumes are only
visible to their owner and to faculty/admin; downloads are gated the same
way even for public resumes.
"""
import logging
from typing import List, Optional, Tuple

from campusconnect.core.exceptions import AuthorizationError, NotFoundError
from campusconnect.models.resume import Resume
from campusconnect.models.user import UploaderSnapshot
from campusconnect.schemas.resume import ResumeCreate, ResumeUpdate, VisibilityUpdate
from campusconnect.services.base import (
    ResourceService,
    changes_from,
    contains,
    invalid,
    new_id,
    paginate,
    validate_payload,
)
from campusconnect.utils.permissions import (
    Role,
    can_download_resume,
    can_view_resume,
    has_permission,
    is_admin,
    is_owner,
    require_roles,
)
from campusconnect.utils.timeutils import sort_key
from campusconnect.utils.uploads import discard_on_error, existing_file, remove_file, save_upload

logger = logging.getLogger(__name__)


def _skill_terms(skills) -> List[str]:
    if isinstance(skills, str):
        skills = skills.split(",")
    return [s.strip().lower() for s in skills or [] if s and s.strip()]


class ResumeService(ResourceService):
    collection = "resumes"
    label = "Resume"
    upload_kind = "resumes"

    def _for_viewer(self, user, resume: dict) -> dict:
        if is_owner(user, resume) or is_admin(user):
            return resume
        return {k: v for k, v in resume.items() if k != "filePath"}

    def _uploader(self, user) -> dict:
        users = self.store.load_all("users")
        record = next((u for u in users if u.get("id") == user["id"]), None)
        if record is None:
            raise NotFoundError("User not found")
        return UploaderSnapshot(
            id=record["id"],
            name=record["name"],
            email=record.get("email"),
            department=record.get("department"),
            semester=record.get("semester"),
        ).model_dump(exclude_none=True)

    def _owned(self, resumes: List[dict], resume_id: str, user, action: str) -> dict:
        resume = self.find(resumes, resume_id)
        if not is_owner(user, resume):
            raise AuthorizationError(f"Access denied. You can only {action} your own resumes.")
        return resume

    def list(self, user, category: Optional[str] = None, experience: Optional[str] = None,
             skills: Optional[str] = None, search: Optional[str] = None,
             page: int = 1, limit: Optional[int] = None):
        resumes = self.load()

        # 학생은 본인 것 + 공개된 것만
        if not has_permission(user, Role.FACULTY):
            resumes = [r for r in resumes if r.get("isPublic") or is_owner(user, r)]

        if category:
            resumes = [r for r in resumes if r.get("category") == category]
        if experience:
            resumes = [r for r in resumes if r.get("experience") == experience]
        terms = _skill_terms(skills)
        if terms:
            resumes = [
                r for r in resumes
                if any(term in skill.lower() for term in terms for skill in r.get("skills", []))
            ]
        if search:
            resumes = [
                r for r in resumes
                if contains(r.get("title"), search)
                or contains(r.get("description"), search)
                or any(contains(skill, search) for skill in r.get("skills", []))
            ]

        resumes.sort(key=lambda r: sort_key(r.get("createdAt")), reverse=True)
        items, pagination = paginate(resumes, page, limit or self.default_limit)
        return [self._for_viewer(user, r) for r in items], pagination

    def get(self, resume_id: str, user) -> dict:
        with self.store.mutate(self.collection) as resumes:
            resume = self.find(resumes, resume_id)
            if not can_view_resume(user, resume):
                raise AuthorizationError("Access denied to this resume")

            resume["viewCount"] = (resume.get("viewCount") or 0) + 1
            resume["lastViewed"] = self.now_iso()

        return self._for_viewer(user, resume)

    def create(self, payload: dict, user, upload=None) -> dict:
        require_roles(user, Role.STUDENT)
        data = validate_payload(ResumeCreate, payload)
        if upload is None:
            raise invalid("file", "File is required")

        uploader = self._uploader(user)
        stored = save_upload(upload, self.upload_kind, self.settings)

        timestamp = self.now_iso()
        resume = Resume(
            id=new_id(),
            title=data.title,
            description=data.description or "",
            category=data.category,
            skills=data.skills,
            experience=data.experience,
            fileName=stored.file_name,
            filePath=stored.file_path,
            fileSize=stored.file_size,
            mimeType=stored.mime_type,
            uploadedBy=uploader,
            isPublic=False,
            viewCount=0,
            downloadCount=0,
            lastViewed=None,
            lastDownloaded=None,
            createdAt=timestamp,
            updatedAt=timestamp,
        ).model_dump(mode="json")
        # 업로더 스냅샷은 값이 있는 필드만 보관
        resume["uploadedBy"] = uploader

        with discard_on_error(stored.file_path, self.settings):
            with self.store.mutate(self.collection) as resumes:
                resumes.append(resume)

        logger.info(f"Resume uploaded: {resume['id']} ({stored.file_name}) by {user['email']}")
        return resume

    def update(self, resume_id: str, payload: dict, user) -> dict:
        data = validate_payload(ResumeUpdate, payload)
        # isPublic 은 visibility 로만 변경
        changes = changes_from(data)

        with self.store.mutate(self.collection) as resumes:
            resume = self._owned(resumes, resume_id, user, "update")
            resume.update(changes)
            resume["updatedAt"] = self.now_iso()

        logger.info(f"Resume updated: {resume_id} by {user['email']}")
        return resume

    def toggle_visibility(self, resume_id: str, user, payload) -> dict:
        """Set ``isPublic``; ``payload`` is ``{"isPublic": bool}`` or a bare bool."""
        if isinstance(payload, bool):
            payload = {"isPublic": payload}
        data = validate_payload(VisibilityUpdate, payload)

        with self.store.mutate(self.collection) as resumes:
            resume = self._owned(resumes, resume_id, user, "modify")
            resume["isPublic"] = data.isPublic
            resume["updatedAt"] = self.now_iso()

        logger.info(f"Resume {resume_id} visibility set to {'public' if data.isPublic else 'private'}")
        return resume

    def delete(self, resume_id: str, user) -> None:
        with self.store.mutate(self.collection) as resumes:
            resume = self._owned(resumes, resume_id, user, "delete")
            resumes.remove(resume)

        remove_file(resume.get("filePath"), self.settings)
        logger.info(f"Resume deleted: {resume_id} by {user['email']}")

    def download(self, resume_id: str, user) -> Tuple[str, str, str]:
        with self.store.mutate(self.collection) as resumes:
            resume = self.find(resumes, resume_id)
            if not can_download_resume(user, resume):
                raise AuthorizationError("Access denied. You cannot download this resume.")

            path = existing_file(resume.get("filePath"), self.settings)
            resume["downloadCount"] = (resume.get("downloadCount") or 0) + 1
            resume["lastDownloaded"] = self.now_iso()

        logger.info(f"Resume downloaded: {resume_id} by {user['email']}")
        return path, resume["fileName"], resume.get("mimeType") or "application/octet-stream"

    def my_resumes(self, user) -> Tuple[List[dict], int]:
        require_roles(user, Role.STUDENT)
        resumes = [r for r in self.load() if is_owner(user, r)]
        resumes.sort(key=lambda r: sort_key(r.get("createdAt")), reverse=True)
        return resumes, len(resumes)
