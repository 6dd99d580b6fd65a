import os
from dotenv import load_dotenv

load_dotenv()  # .env 파일이 있으면 환경변수로 로드


def _as_bool(value: str) -> bool:
    return str(value).lower() in ["true", "1", "yes"]


def _as_list(value: str) -> list:
    return [item.strip().lower() for item in value.split(",") if item.strip()]


class Settings:
    """
    Runtime configuration read from the environment.

    Keyword overrides take precedence over environment variables, so tests can
    build an isolated instance without touching os.environ.
    """

    def __init__(self, **overrides):
        self.API_TITLE = os.getenv("API_TITLE", "CampusConnect API")
        self.API_VERSION = os.getenv("API_VERSION", "1.0.0")
        self.DEBUG = _as_bool(os.getenv("DEBUG", "False"))

        # 저장소 경로
        self.DATA_DIR = os.getenv("DATA_DIR", os.path.join(os.getcwd(), "data"))
        self.UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(os.getcwd(), "uploads"))

        # JWT
        self.JWT_SECRET = os.getenv("JWT_SECRET", "your-secret-key")
        self.JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
        self.JWT_EXPIRES_DAYS = int(os.getenv("JWT_EXPIRES_DAYS", "7"))
        self.BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

        # 업로드 제한
        self.MAX_FILE_SIZE = int(os.getenv("MAX_FILE_SIZE", str(10 * 1024 * 1024)))
        self.ALLOWED_EXTENSIONS = {
            "materials": _as_list(os.getenv("MATERIAL_EXTENSIONS", "pdf,doc,docx,ppt,pptx,txt")),
            "resumes": _as_list(os.getenv("RESUME_EXTENSIONS", "pdf,doc,docx")),
            "events": _as_list(os.getenv("EVENT_IMAGE_EXTENSIONS", "jpg,jpeg,png")),
        }

        self.TIMEZONE = os.getenv("TIMEZONE", "UTC")
        self.CORS_ORIGINS = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
            if origin.strip()
        ]

        self.ALLOW_ADMIN_REGISTRATION = _as_bool(os.getenv("ALLOW_ADMIN_REGISTRATION", "False"))
        # 자료 상세 조회 시 다운로드 수를 함께 올릴지 여부 (기존 동작 재현용)
        self.COUNT_MATERIAL_VIEWS = _as_bool(os.getenv("COUNT_MATERIAL_VIEWS", "False"))

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)


settings = Settings()
