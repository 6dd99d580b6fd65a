# campusconnect/utils/forms.py
def form_payload(**fields) -> dict:
    """Multipart form fields that were actually sent."""
    return {key: value for key, value in fields.items() if value is not None}


def uploaded(file):
    # 파일 없이 빈 파트만 온 경우
    if file is None or isinstance(file, str) or not getattr(file, "filename", None):
        return None
    return file
