# campusconnect/routers/materials.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import FileResponse

from campusconnect.core.dependencies import get_current_user, get_material_service
from campusconnect.core.responses import success
from campusconnect.services.material_service import MaterialService
from campusconnect.utils.forms import form_payload, uploaded

router = APIRouter()


@router.get("")
def list_materials(
    subject: Optional[str] = None,
    semester: Optional[int] = None,
    department: Optional[str] = None,
    materialType: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    user=Depends(get_current_user),
    materials: MaterialService = Depends(get_material_service),
):
    items, pagination = materials.list(user, subject=subject, semester=semester, department=department,
                                       material_type=materialType, search=search, page=page, limit=limit)
    return success("Materials retrieved successfully", {"materials": items, "pagination": pagination})


@router.get("/stats/overview")
def material_stats(user=Depends(get_current_user), materials: MaterialService = Depends(get_material_service)):
    return success("Statistics retrieved successfully", {"stats": materials.stats(user)})


@router.get("/{material_id}")
def get_material(material_id: str, user=Depends(get_current_user),
                 materials: MaterialService = Depends(get_material_service)):
    return success("Material retrieved successfully", {"material": materials.get(material_id, user)})


@router.post("", status_code=status.HTTP_201_CREATED)
def upload_material(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    subject: Optional[str] = Form(None),
    semester: Optional[str] = Form(None),
    department: Optional[str] = Form(None),
    materialType: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    user=Depends(get_current_user),
    materials: MaterialService = Depends(get_material_service),
):
    payload = form_payload(title=title, description=description, subject=subject, semester=semester,
                           department=department, materialType=materialType)
    material = materials.create(payload, user, uploaded(file))
    return success("Material uploaded successfully", {"material": material})


@router.put("/{material_id}")
def update_material(
    material_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    subject: Optional[str] = Form(None),
    semester: Optional[str] = Form(None),
    department: Optional[str] = Form(None),
    materialType: Optional[str] = Form(None),
    user=Depends(get_current_user),
    materials: MaterialService = Depends(get_material_service),
):
    payload = form_payload(title=title, description=description, subject=subject, semester=semester,
                           department=department, materialType=materialType)
    return success("Material updated successfully", {"material": materials.update(material_id, payload, user)})


@router.delete("/{material_id}")
def delete_material(material_id: str, user=Depends(get_current_user),
                    materials: MaterialService = Depends(get_material_service)):
    materials.delete(material_id, user)
    return success("Material deleted successfully")


@router.get("/{material_id}/download")
def download_material(material_id: str, user=Depends(get_current_user),
                      materials: MaterialService = Depends(get_material_service)):
    path, file_name, mime_type = materials.download(material_id, user)
    return FileResponse(path, media_type=mime_type, filename=file_name)
