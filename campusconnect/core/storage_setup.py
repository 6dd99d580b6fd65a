# campusconnect/core/storage_setup.py
"""
데이터 파일 및 업로드 디렉터리 초기화
"""
import logging
import os

from campusconnect.core.config import Settings, settings as default_settings
from campusconnect.core.exceptions import StorageError
from campusconnect.core.storage import COLLECTIONS, JsonStore
from campusconnect.utils.uploads import UPLOAD_KINDS

logger = logging.getLogger(__name__)


def setup_storage(settings: Settings = default_settings) -> bool:
    """Create the collection files and upload folders the API expects."""
    store = JsonStore(settings.DATA_DIR)

    try:
        created = store.ensure_layout(COLLECTIONS)
        for collection in created:
            logger.info(f"Created data file: {store.path_for(collection)}")

        for kind in UPLOAD_KINDS:
            upload_dir = os.path.join(settings.UPLOAD_DIR, kind)
            if not os.path.isdir(upload_dir):
                os.makedirs(upload_dir, exist_ok=True)
                logger.info(f"Created directory: {upload_dir}")

        # 컬렉션별 레코드 수 확인
        for collection in COLLECTIONS:
            count = len(store.load_all(collection))
            logger.info(f"Collection '{collection}': {count} records")

        return True

    except (OSError, StorageError) as e:
        logger.error(f"Storage setup failed: {e}")
        return False


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    if setup_storage():
        print("Storage layout ready. Start the server with: python run_server.py")
    else:
        print("Storage setup failed. Check DATA_DIR and UPLOAD_DIR permissions.")
