import os

import pytest

from campusconnect.core.config import Settings
from campusconnect.core.exceptions import AuthorizationError, NotFoundError, StorageError, ValidationError
from campusconnect.services.material_service import MaterialService
from campusconnect.utils.uploads import resolve_path


@pytest.fixture
def materials(store, settings):
    return MaterialService(store, settings)


def material_payload(**overrides):
    payload = {
        "title": "Data Structures notes",
        "description": "Linked lists, stacks and queues",
        "subject": "Data Structures",
        "semester": 3,
        "department": "CSE",
        "materialType": "notes",
    }
    payload.update(overrides)
    return payload


def test_file_is_required(materials, faculty):
    with pytest.raises(ValidationError) as exc:
        materials.create(material_payload(), faculty)
    assert exc.value.errors == [{"field": "file", "message": "File is required"}]


def test_students_cannot_upload(materials, student, upload):
    with pytest.raises(AuthorizationError):
        materials.create(material_payload(), student, upload("notes.pdf"))


def test_disallowed_extension(materials, faculty, upload):
    with pytest.raises(ValidationError):
        materials.create(material_payload(), faculty, upload("virus.exe"))


def test_oversized_file_is_rejected_and_removed(store, tmp_path, faculty, upload):
    small = Settings(DATA_DIR=store.data_dir, UPLOAD_DIR=str(tmp_path / "small"), MAX_FILE_SIZE=10)
    service = MaterialService(store, small)

    with pytest.raises(ValidationError):
        service.create(material_payload(), faculty, upload("big.pdf", b"x" * 100))

    assert os.listdir(os.path.join(small.UPLOAD_DIR, "materials")) == []
    assert store.load_all("materials") == []


def test_create_stores_file_metadata(materials, settings, faculty, upload):
    material = materials.create(material_payload(), faculty, upload("ds-notes.pdf", b"%PDF-1.4", "application/pdf"))

    assert material["fileName"] == "ds-notes.pdf"
    assert material["filePath"].startswith("/uploads/materials/")
    assert material["filePath"].endswith("-ds-notes.pdf")
    assert material["fileSize"] == len(b"%PDF-1.4")
    assert material["mimeType"] == "application/pdf"
    assert material["downloadCount"] == 0
    assert material["uploadedBy"]["id"] == faculty["id"]
    assert os.path.isfile(resolve_path(material["filePath"], settings))


def test_semester_filter_uses_equality(materials, student, faculty, upload):
    materials.create(material_payload(title="Sem three"), faculty, upload("a.pdf"))
    materials.create(material_payload(title="Sem four", semester=4), faculty, upload("b.pdf"))

    items, pagination = materials.list(student, semester=3)
    assert [m["title"] for m in items] == ["Sem three"]
    assert pagination["total"] == 1


def test_get_does_not_count_downloads_by_default(materials, student, faculty, upload):
    material = materials.create(material_payload(), faculty, upload("a.pdf"))
    assert materials.get(material["id"], student)["downloadCount"] == 0
    assert materials.get(material["id"], student)["downloadCount"] == 0


def test_get_counts_when_enabled(store, settings, student, faculty, upload):
    settings.COUNT_MATERIAL_VIEWS = True
    service = MaterialService(store, settings)
    material = service.create(material_payload(), faculty, upload("a.pdf"))

    fetched = service.get(material["id"], student)
    assert fetched["downloadCount"] == 1
    assert fetched["lastDownloaded"] is not None


def test_download_counts_and_returns_file(materials, student, faculty, upload):
    material = materials.create(material_payload(), faculty, upload("a.pdf", b"content", "application/pdf"))

    path, file_name, mime_type = materials.download(material["id"], student)
    with open(path, "rb") as fp:
        assert fp.read() == b"content"
    assert file_name == "a.pdf"
    assert mime_type == "application/pdf"

    materials.download(material["id"], student)
    stored = materials.get(material["id"], student)
    assert stored["downloadCount"] == 2
    assert stored["lastDownloaded"] is not None


def test_download_missing_file(materials, settings, student, faculty, upload):
    material = materials.create(material_payload(), faculty, upload("a.pdf"))
    os.remove(resolve_path(material["filePath"], settings))

    with pytest.raises(NotFoundError):
        materials.download(material["id"], student)
    assert materials.get(material["id"], student)["downloadCount"] == 0


def test_delete_tolerates_missing_file(materials, settings, faculty, upload):
    material = materials.create(material_payload(), faculty, upload("a.pdf"))
    os.remove(resolve_path(material["filePath"], settings))

    materials.delete(material["id"], faculty)

    with pytest.raises(NotFoundError):
        materials.delete(material["id"], faculty)


def test_update_preserves_file_fields(materials, faculty, upload):
    material = materials.create(material_payload(), faculty, upload("a.pdf"))
    updated = materials.update(
        material["id"],
        {"title": "Revised notes", "fileName": "evil.pdf", "downloadCount": 99},
        faculty,
    )
    assert updated["title"] == "Revised notes"
    for key in ("fileName", "filePath", "fileSize", "mimeType", "downloadCount", "uploadedBy", "createdAt"):
        assert updated[key] == material[key]


def test_update_by_other_faculty_forbidden(materials, faculty, make_user, upload):
    material = materials.create(material_payload(), faculty, upload("a.pdf"))
    with pytest.raises(AuthorizationError):
        materials.update(material["id"], {"title": "Not mine"}, make_user("faculty"))


def test_stats(materials, student, faculty, admin, upload):
    first = materials.create(material_payload(), faculty, upload("a.pdf"))
    materials.create(material_payload(materialType="assignment", semester=5), faculty, upload("b.pdf"))
    materials.download(first["id"], student)

    with pytest.raises(AuthorizationError):
        materials.stats(student)

    stats = materials.stats(admin)
    assert stats["totalMaterials"] == 2
    assert stats["byType"] == {"notes": 1, "assignment": 1}
    assert stats["bySemester"] == {"3": 1, "5": 1}
    assert stats["byDepartment"] == {"CSE": 2}
    assert stats["totalDownloads"] == 1
    assert len(stats["recentUploads"]) == 2


def test_failed_save_removes_stored_file(materials, store, settings, faculty, upload, monkeypatch):
    def broken_save(collection, records):
        raise StorageError(f"Could not save {collection}")

    monkeypatch.setattr(store, "save_all", broken_save)
    with pytest.raises(StorageError):
        materials.create(material_payload(), faculty, upload("a.pdf"))

    assert os.listdir(os.path.join(settings.UPLOAD_DIR, "materials")) == []
