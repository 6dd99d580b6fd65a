# campusconnect/services/base.py
import math
import uuid
from typing import Iterable, List, Optional, Tuple, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from campusconnect.core.config import Settings
from campusconnect.core.exceptions import NotFoundError, ValidationError
from campusconnect.core.storage import JsonStore
from campusconnect.models.user import Pagination
from campusconnect.utils.timeutils import now_iso, utcnow

MAX_PAGE_SIZE = 100


def new_id() -> str:
    return uuid.uuid4().hex


def author_snapshot(user) -> dict:
    return {"id": user["id"], "name": user["name"], "role": user["role"]}


def field_errors(exc: PydanticValidationError) -> List[dict]:
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "body"
        errors.append({"field": field, "message": err.get("msg", "Invalid value")})
    return errors


def validate_payload(schema: Type[BaseModel], payload) -> BaseModel:
    try:
        return schema.model_validate(payload if payload is not None else {})
    except PydanticValidationError as e:
        raise ValidationError("Validation failed", errors=field_errors(e))


def invalid(field: str, message: str) -> ValidationError:
    return ValidationError("Validation failed", errors=[{"field": field, "message": message}])


def paginate(items: List[dict], page: int = 1, limit: int = 20) -> Tuple[List[dict], dict]:
    """
    1-indexed page slice plus the pagination block.

    ``total`` counts the filtered set; a page past the end, or below 1, is an
    empty list.
    """
    try:
        page, limit = int(page), int(limit)
    except (TypeError, ValueError):
        raise invalid("page", "page and limit must be integers")
    if limit < 1:
        raise invalid("limit", "limit must be at least 1")
    limit = min(limit, MAX_PAGE_SIZE)

    total = len(items)
    start = (page - 1) * limit
    pagination = Pagination(total=total, page=page, limit=limit, pages=math.ceil(total / limit))
    # 범위 밖 페이지 (0 이하 포함) 는 빈 목록
    page_items = items[start:start + limit] if page >= 1 else []
    return page_items, pagination.model_dump()


def changes_from(model: BaseModel, nullable: Iterable[str] = ()) -> dict:
    """Fields the caller actually sent; explicit nulls are kept only for nullable fields."""
    changes = model.model_dump(mode="json", exclude_unset=True)
    return {key: value for key, value in changes.items() if value is not None or key in nullable}


def contains(haystack: Optional[str], needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


class ResourceService:
    """Shared plumbing for services backed by one JSON collection."""

    collection = ""
    label = "Resource"
    default_limit = 20

    def __init__(self, store: JsonStore, settings: Settings):
        self.store = store
        self.settings = settings

    def now(self):
        return utcnow()

    def now_iso(self) -> str:
        return now_iso()

    def not_found(self) -> NotFoundError:
        return NotFoundError(f"{self.label} not found")

    def load(self) -> List[dict]:
        return self.store.load_all(self.collection)

    def find(self, records: Iterable[dict], record_id: str) -> dict:
        for record in records:
            if record.get("id") == record_id:
                return record
        raise self.not_found()

    def index_of(self, records: List[dict], record_id: str) -> int:
        for index, record in enumerate(records):
            if record.get("id") == record_id:
                return index
        raise self.not_found()

