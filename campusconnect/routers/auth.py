# campusconnect/routers/auth.py
import logging

from fastapi import APIRouter, Body, Depends, status

from campusconnect.core.dependencies import get_auth_service, get_current_user
from campusconnect.core.responses import success
from campusconnect.services.auth_service import AuthService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: dict = Body(...), auth: AuthService = Depends(get_auth_service)):
    user, token = auth.register(payload)
    return success("User registered successfully", {"user": user, "token": token})


@router.post("/login")
def login(payload: dict = Body(...), auth: AuthService = Depends(get_auth_service)):
    user, token = auth.login(payload)
    return success("Login successful", {"user": user, "token": token})


@router.get("/me")
def me(user=Depends(get_current_user), auth: AuthService = Depends(get_auth_service)):
    return success("Profile retrieved successfully", {"user": auth.get_profile(user["id"])})


@router.put("/profile")
def update_profile(payload: dict = Body(...), user=Depends(get_current_user),
                   auth: AuthService = Depends(get_auth_service)):
    return success("Profile updated successfully", {"user": auth.update_profile(user["id"], payload)})


@router.put("/password")
def change_password(payload: dict = Body(...), user=Depends(get_current_user),
                    auth: AuthService = Depends(get_auth_service)):
    auth.change_password(user["id"], payload)
    return success("Password changed successfully")


@router.post("/logout")
def logout(user=Depends(get_current_user)):
    # 토큰은 서버에 저장하지 않으므로 클라이언트가 폐기
    logger.info(f"User logged out: {user['email']}")
    return success("Logout successful")
