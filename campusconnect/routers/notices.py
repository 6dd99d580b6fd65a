# campusconnect/routers/notices.py
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status

from campusconnect.core.dependencies import get_current_user, get_notice_service
from campusconnect.core.responses import success
from campusconnect.services.notice_service import NoticeService

router = APIRouter()


@router.get("")
def list_notices(
    category: Optional[str] = None,
    department: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    user=Depends(get_current_user),
    notices: NoticeService = Depends(get_notice_service),
):
    items, pagination = notices.list(user, category=category, department=department,
                                     search=search, page=page, limit=limit)
    return success("Notices retrieved successfully", {"notices": items, "pagination": pagination})


@router.get("/{notice_id}")
def get_notice(notice_id: str, user=Depends(get_current_user), notices: NoticeService = Depends(get_notice_service)):
    return success("Notice retrieved successfully", {"notice": notices.get(notice_id, user)})


@router.post("", status_code=status.HTTP_201_CREATED)
def create_notice(payload: dict = Body(...), user=Depends(get_current_user),
                  notices: NoticeService = Depends(get_notice_service)):
    return success("Notice created successfully", {"notice": notices.create(payload, user)})


@router.put("/{notice_id}")
def update_notice(notice_id: str, payload: dict = Body(...), user=Depends(get_current_user),
                  notices: NoticeService = Depends(get_notice_service)):
    return success("Notice updated successfully", {"notice": notices.update(notice_id, payload, user)})


@router.delete("/{notice_id}")
def delete_notice(notice_id: str, user=Depends(get_current_user), notices: NoticeService = Depends(get_notice_service)):
    notices.delete(notice_id, user)
    return success("Notice deleted successfully")
