#!/usr/bin/env python3
"""
CampusConnect API 서버 실행 스크립트
데이터 파일/업로드 폴더를 확인한 뒤 uvicorn 으로 FastAPI 앱을 실행합니다.
"""
import logging
import os
import sys

import uvicorn

from campusconnect.core.config import settings
from campusconnect.core.storage_setup import setup_storage
from campusconnect.main import app

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    port = int(os.getenv("PORT", "8080"))

    print("🚀 CampusConnect API 서버 시작 중...")
    print("🔍 저장소 상태 확인 중...")
    if not setup_storage(settings):
        print("❌ 저장소 초기화에 문제가 있습니다.")
        print(f"DATA_DIR({settings.DATA_DIR}) 와 UPLOAD_DIR({settings.UPLOAD_DIR}) 권한을 확인해주세요.")
        sys.exit(1)

    print("✅ 저장소 확인 완료!")
    print(f"📊 서버 주소: http://localhost:{port}")
    print(f"📋 API 문서: http://localhost:{port}/docs\n")

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        log_level="info",
        reload=False
    )
