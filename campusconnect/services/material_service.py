# campusconnect/services/material_service.py
import logging
from collections import Counter
from typing import Optional, Tuple

from campusconnect.core.exceptions import AuthorizationError
from campusconnect.models.material import Material
from campusconnect.schemas.material import MaterialCreate, MaterialUpdate
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
from campusconnect.utils.permissions import Role, is_owner_or_admin, require_roles
from campusconnect.utils.timeutils import sort_key
from campusconnect.utils.uploads import discard_on_error, existing_file, remove_file, save_upload

logger = logging.getLogger(__name__)

RECENT_UPLOADS = 5


class MaterialService(ResourceService):
    collection = "materials"
    label = "Material"
    upload_kind = "materials"

    def _count_download(self, material: dict) -> None:
        material["downloadCount"] = (material.get("downloadCount") or 0) + 1
        material["lastDownloaded"] = self.now_iso()

    def list(self, user, subject: Optional[str] = None, semester: Optional[int] = None,
             department: Optional[str] = None, material_type: Optional[str] = None,
             search: Optional[str] = None, page: int = 1, limit: Optional[int] = None):
        materials = self.load()

        if subject:
            materials = [m for m in materials if contains(m.get("subject"), subject)]
        if semester is not None:
            try:
                semester = int(semester)
            except (TypeError, ValueError):
                raise invalid("semester", "semester must be an integer")
            materials = [m for m in materials if m.get("semester") == semester]
        if department:
            materials = [m for m in materials if contains(m.get("department"), department)]
        if material_type:
            materials = [m for m in materials if m.get("materialType") == material_type]
        if search:
            materials = [
                m for m in materials
                if contains(m.get("title"), search)
                or contains(m.get("description"), search)
                or contains(m.get("subject"), search)
            ]

        materials.sort(key=lambda m: sort_key(m.get("createdAt")), reverse=True)
        return paginate(materials, page, limit or self.default_limit)

    def get(self, material_id: str, user) -> dict:
        if not self.settings.COUNT_MATERIAL_VIEWS:
            return self.find(self.load(), material_id)

        with self.store.mutate(self.collection) as materials:
            material = self.find(materials, material_id)
            self._count_download(material)
        return material

    def create(self, payload: dict, user, upload=None) -> dict:
        require_roles(user, Role.FACULTY, Role.ADMIN)
        data = validate_payload(MaterialCreate, payload)
        if upload is None:
            raise invalid("file", "File is required")

        stored = save_upload(upload, self.upload_kind, self.settings)

        timestamp = self.now_iso()
        material = Material(
            id=new_id(),
            title=data.title,
            description=data.description or "",
            subject=data.subject,
            semester=data.semester,
            department=data.department,
            materialType=data.materialType,
            fileName=stored.file_name,
            filePath=stored.file_path,
            fileSize=stored.file_size,
            mimeType=stored.mime_type,
            uploadedBy=author_snapshot(user),
            downloadCount=0,
            lastDownloaded=None,
            createdAt=timestamp,
            updatedAt=timestamp,
        ).model_dump(mode="json")

        with discard_on_error(stored.file_path, self.settings):
            with self.store.mutate(self.collection) as materials:
                materials.append(material)

        logger.info(f"Material uploaded: {material['id']} ({stored.file_name}) by {user['email']}")
        return material

    def update(self, material_id: str, payload: dict, user) -> dict:
        data = validate_payload(MaterialUpdate, payload)
        # 파일 정보, 다운로드 수, 업로더, 생성일은 스키마에 없으므로 보존됨
        changes = changes_from(data)

        with self.store.mutate(self.collection) as materials:
            material = self.find(materials, material_id)
            if not is_owner_or_admin(user, material):
                raise AuthorizationError("Access denied. You can only update your own materials.")

            material.update(changes)
            material["updatedAt"] = self.now_iso()

        logger.info(f"Material updated: {material_id} by {user['email']}")
        return material

    def delete(self, material_id: str, user) -> None:
        with self.store.mutate(self.collection) as materials:
            index = self.index_of(materials, material_id)
            if not is_owner_or_admin(user, materials[index]):
                raise AuthorizationError("Access denied. You can only delete your own materials.")
            material = materials.pop(index)

        remove_file(material.get("filePath"), self.settings)
        logger.info(f"Material deleted: {material_id} by {user['email']}")

    def download(self, material_id: str, user) -> Tuple[str, str, str]:
        """
        Resolve a material's file for download and count the download.

        Returns ``(absolute path, original file name, mime type)``.
        """
        with self.store.mutate(self.collection) as materials:
            material = self.find(materials, material_id)
            path = existing_file(material.get("filePath"), self.settings)
            self._count_download(material)

        logger.info(f"Material downloaded: {material_id} by {user['email']}")
        return path, material["fileName"], material.get("mimeType") or "application/octet-stream"

    def stats(self, user) -> dict:
        require_roles(user, Role.FACULTY, Role.ADMIN)
        materials = self.load()
        recent = sorted(materials, key=lambda m: sort_key(m.get("createdAt")), reverse=True)[:RECENT_UPLOADS]

        return {
            "totalMaterials": len(materials),
            "byType": dict(Counter(m.get("materialType") for m in materials)),
            "bySemester": dict(Counter(str(m.get("semester")) for m in materials)),
            "byDepartment": dict(Counter(m.get("department") for m in materials)),
            "totalDownloads": sum(m.get("downloadCount") or 0 for m in materials),
            "recentUploads": [
                {
                    "id": m["id"],
                    "title": m.get("title"),
                    "subject": m.get("subject"),
                    "uploadedBy": (m.get("uploadedBy") or {}).get("name"),
                    "createdAt": m.get("createdAt"),
                }
                for m in recent
            ],
        }
