import pytest

from campusconnect.core.exceptions import ValidationError
from campusconnect.services.base import MAX_PAGE_SIZE, paginate
from campusconnect.services.notice_service import NoticeService


def test_pages_over_filtered_set():
    records = [{"id": str(i)} for i in range(25)]

    page3, meta = paginate(records, page=3, limit=10)
    assert len(page3) == 5
    assert meta == {"total": 25, "page": 3, "limit": 10, "pages": 3}

    page4, meta = paginate(records, page=4, limit=10)
    assert page4 == []
    assert meta["total"] == 25


def test_limit_is_capped():
    _, meta = paginate([{"id": "1"}], page=1, limit=1000)
    assert meta["limit"] == MAX_PAGE_SIZE


def test_page_below_one_is_empty():
    records = [{"id": "1"}, {"id": "2"}]
    for page in (0, -3):
        items, meta = paginate(records, page=page, limit=10)
        assert items == []
        assert meta["total"] == 2


def test_non_integer_page_rejected():
    with pytest.raises(ValidationError):
        paginate([], page="first", limit=10)


def test_service_list_paginates(store, settings, student, faculty):
    notices = NoticeService(store, settings)
    for i in range(25):
        notices.create({"title": f"Notice {i:02d}", "content": "Content long enough.", "category": "general"}, faculty)

    items, meta = notices.list(student, page=3, limit=10)
    assert len(items) == 5
    assert meta["pages"] == 3

    items, meta = notices.list(student, page=4, limit=10)
    assert items == []
    assert meta["total"] == 25
