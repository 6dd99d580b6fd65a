# campusconnect/core/dependencies.py
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from campusconnect.core.config import Settings, settings
from campusconnect.core.storage import JsonStore
from campusconnect.services.auth_service import AuthService
from campusconnect.services.event_service import EventService
from campusconnect.services.material_service import MaterialService
from campusconnect.services.notice_service import NoticeService
from campusconnect.services.resume_service import ResumeService


def get_settings() -> Settings:
    return settings


@lru_cache()
def _store_for(data_dir: str) -> JsonStore:
    # 같은 경로는 같은 인스턴스 (컬렉션 락 공유)
    return JsonStore(data_dir)


def get_store(settings: Settings = Depends(get_settings)) -> JsonStore:
    return _store_for(settings.DATA_DIR)


def get_auth_service(store: JsonStore = Depends(get_store), settings: Settings = Depends(get_settings)) -> AuthService:
    return AuthService(store, settings)


def bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    return authorization.split(" ", 1)[1].strip() or None


def get_current_user(token: Optional[str] = Depends(bearer_token),
                     auth: AuthService = Depends(get_auth_service)) -> dict:
    """Identity of the caller; raises an AuthenticationError subclass (401) otherwise."""
    return auth.resolve_user(token)


def get_notice_service(store: JsonStore = Depends(get_store), settings: Settings = Depends(get_settings)) -> NoticeService:
    return NoticeService(store, settings)


def get_event_service(store: JsonStore = Depends(get_store), settings: Settings = Depends(get_settings)) -> EventService:
    return EventService(store, settings)


def get_material_service(store: JsonStore = Depends(get_store), settings: Settings = Depends(get_settings)) -> MaterialService:
    return MaterialService(store, settings)


def get_resume_service(store: JsonStore = Depends(get_store), settings: Settings = Depends(get_settings)) -> ResumeService:
    return ResumeService(store, settings)
