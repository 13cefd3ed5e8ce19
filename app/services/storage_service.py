# app/services/storage_service.py
import logging
from datetime import timedelta
from typing import Optional
from urllib.parse import unquote
from flask import Flask
from firebase_admin import storage
from werkzeug.utils import secure_filename

from app.utils.datetime_utils import DateTimeUtils

class StorageService:
    """
    Firebase Storage 관련 로직을 담당하는 서비스 클래스입니다.
    관측 사진 업로드, 직접 업로드용 Pre-signed URL 생성, 삭제 기능을 제공합니다.
    """

    # 'upload_type'별 저장 폴더. 모든 경로는 사용자 uid로 구분됩니다.
    PATH_MAP = {
        "journal_image": "journal_images/{user_id}",
        "profile_image": "profile_images/{user_id}",
    }

    def __init__(self, bucket=None):
        """
        실제 버킷 객체는 init_app 메서드를 통해 주입됩니다. (테스트에서는 직접 전달)
        """
        self.bucket = bucket

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 Storage 버킷을 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        bucket_name = app.config.get('FIREBASE_STORAGE_BUCKET')
        if not bucket_name:
            raise ValueError("FIREBASE_STORAGE_BUCKET 설정이 .env 또는 설정 파일에 필요합니다.")

        self.bucket = storage.bucket(bucket_name)
        logging.info("StorageService: Firebase Storage 서비스가 성공적으로 초기화되었습니다.")

    def _ensure_bucket(self):
        if not self.bucket:
            raise RuntimeError("StorageService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

    def build_blob_path(self, user_id: str, upload_type: str, filename: str) -> str:
        """
        '<폴더>/<uid>/<업로드 시각(ms)>_<원본 파일명>' 형식의 저장 경로를 만듭니다.
        """
        folder_template = self.PATH_MAP.get(upload_type)
        if not folder_template:
            raise ValueError(f"'{upload_type}'은(는) 유효한 업로드 타입이 아닙니다.")

        safe_name = secure_filename(filename or '') or 'image'
        return f"{folder_template.format(user_id=user_id)}/{DateTimeUtils.now_ms()}_{safe_name}"

    def upload_journal_image(self, user_id: str, file_storage) -> str:
        """
        관측 사진을 업로드하고 공개 URL을 반환합니다. 이 URL은 일지의 imageUrl에 그대로 저장됩니다.

        :param user_id: 현재 로그인된 사용자 uid
        :param file_storage: Flask 요청의 업로드 파일 (werkzeug FileStorage)
        :return: 공개적으로 접근 가능한 URL
        """
        self._ensure_bucket()
        blob_path = self.build_blob_path(user_id, "journal_image", file_storage.filename)
        blob = self.bucket.blob(blob_path)
        try:
            blob.upload_from_file(file_storage.stream, content_type=file_storage.mimetype)
            blob.make_public()
        except Exception as e:
            logging.error(f"관측 사진 업로드 실패 (path: {blob_path}): {e}", exc_info=True)
            raise
        logging.info(f"관측 사진 업로드 완료: {blob_path}")
        return blob.public_url

    def generate_upload_url(self, user_id: str, upload_type: str, filename: str, content_type: str) -> dict:
        """
        클라이언트가 서버를 거치지 않고 Storage에 직접 PUT 업로드할 수 있는 Pre-signed URL을 생성합니다.
        업로드 후에는 public_url을 imageUrl로 사용합니다.
        """
        self._ensure_bucket()
        destination_blob_name = self.build_blob_path(user_id, upload_type, filename)
        blob = self.bucket.blob(destination_blob_name)

        # 15분 동안 유효한 업로드 전용 URL을 생성합니다.
        upload_url = blob.generate_signed_url(
            version="v4",
            expiration=timedelta(minutes=15),
            method="PUT",
            content_type=content_type
        )

        return {
            "upload_url": upload_url,
            "file_path": destination_blob_name,
            "public_url": blob.public_url
        }

    def path_from_url(self, url: str) -> Optional[str]:
        """이 버킷의 공개 URL이면 blob 경로를, 외부 URL이면 None을 반환합니다."""
        if not url or not self.bucket:
            return None
        prefix = f"https://storage.googleapis.com/{self.bucket.name}/"
        if not url.startswith(prefix):
            return None
        return unquote(url[len(prefix):].split("?")[0])

    def delete_by_url(self, url: str) -> bool:
        """
        공개 URL에 해당하는 파일을 삭제합니다. 외부 URL이거나 파일이 없으면 False를 반환합니다.
        """
        file_path = self.path_from_url(url)
        if not file_path:
            return False
        blob = self.bucket.blob(file_path)
        if not blob.exists():
            return False
        blob.delete()
        return True
