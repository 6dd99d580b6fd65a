# campusconnect/routers/resumes.py
from typing import Optional

from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import FileResponse

from campusconnect.core.dependencies import get_current_user, get_resume_service
from campusconnect.core.responses import success
from campusconnect.services.resume_service import ResumeService
from campusconnect.utils.forms import form_payload, uploaded

router = APIRouter()


@router.get("")
def list_resumes(
    category: Optional[str] = None,
    experience: Optional[str] = None,
    skills: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    user=Depends(get_current_user),
    resumes: ResumeService = Depends(get_resume_service),
):
    items, pagination = resumes.list(user, category=category, experience=experience, skills=skills,
                                     search=search, page=page, limit=limit)
    return success("Resumes retrieved successfully", {"resumes": items, "pagination": pagination})


@router.get("/my/list")
def my_resumes(user=Depends(get_current_user), resumes: ResumeService = Depends(get_resume_service)):
    items, total = resumes.my_resumes(user)
    return success("Your resumes retrieved successfully", {"resumes": items, "total": total})


@router.get("/{resume_id}")
def get_resume(resume_id: str, user=Depends(get_current_user), resumes: ResumeService = Depends(get_resume_service)):
    return success("Resume retrieved successfully", {"resume": resumes.get(resume_id, user)})


@router.post("", status_code=status.HTTP_201_CREATED)
def upload_resume(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    skills: Optional[str] = Form(None),
    experience: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    user=Depends(get_current_user),
    resumes: ResumeService = Depends(get_resume_service),
):
    payload = form_payload(title=title, description=description, category=category,
                           skills=skills, experience=experience)
    resume = resumes.create(payload, user, uploaded(file))
    return success("Resume uploaded successfully", {"resume": resume})


@router.put("/{resume_id}")
def update_resume(
    resume_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    skills: Optional[str] = Form(None),
    experience: Optional[str] = Form(None),
    user=Depends(get_current_user),
    resumes: ResumeService = Depends(get_resume_service),
):
    payload = form_payload(title=title, description=description, category=category,
                           skills=skills, experience=experience)
    return success("Resume updated successfully", {"resume": resumes.update(resume_id, payload, user)})


@router.put("/{resume_id}/visibility")
def set_visibility(resume_id: str, payload: dict = Body(...), user=Depends(get_current_user),
                   resumes: ResumeService = Depends(get_resume_service)):
    resume = resumes.toggle_visibility(resume_id, user, payload)
    state = "public" if resume["isPublic"] else "private"
    return success(f"Resume is now {state}", {"resume": resume})


@router.delete("/{resume_id}")
def delete_resume(resume_id: str, user=Depends(get_current_user), resumes: ResumeService = Depends(get_resume_service)):
    resumes.delete(resume_id, user)
    return success("Resume deleted successfully")


@router.get("/{resume_id}/download")
def download_resume(resume_id: str, user=Depends(get_current_user),
                    resumes: ResumeService = Depends(get_resume_service)):
    path, file_name, mime_type = resumes.download(resume_id, user)
    return FileResponse(path, media_type=mime_type, filename=file_name)
