"""스토리지 서비스 — 상품 이미지를 S3 또는 로컬 디스크에 저장.

Storage Service — Stores product images on S3 or the local disk.
AWS 키가 비어있으면 자동으로 로컬 모드로 전환됩니다.
In local mode files are served by the app under UPLOADS_URL_PREFIX.
"""

import logging
import uuid
from pathlib import Path

from app.config import settings
from app.utils.exceptions import BadRequestError

logger = logging.getLogger("catalog.storage")

# 프로젝트 루트 — LOCAL_UPLOADS_DIR 미설정 시 <root>/uploads/images 사용
_PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent

# 허용 이미지 타입 → 파일 확장자 (Accepted content types and their extensions)
ALLOWED_IMAGE_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


class StorageService:
    """이미지 업로드 서비스 — S3 또는 로컬 모드 자동 선택."""

    def __init__(self) -> None:
        self._client = None

    @property
    def is_local(self) -> bool:
        return not settings.AWS_ACCESS_KEY_ID or not settings.AWS_S3_BUCKET

    @property
    def uploads_dir(self) -> Path:
        if settings.LOCAL_UPLOADS_DIR:
            return Path(settings.LOCAL_UPLOADS_DIR)
        return _PROJECT_ROOT / "uploads" / "images"

    @property
    def client(self):
        if self.is_local:
            return None
        if self._client is None:
            import boto3
            from botocore.config import Config as BotoConfig

            self._client = boto3.client(
                "s3",
                region_name=settings.AWS_S3_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                config=BotoConfig(signature_version="s3v4"),
            )
        return self._client

    @property
    def max_image_bytes(self) -> int:
        return settings.MAX_IMAGE_SIZE_MB * 1024 * 1024

    @property
    def _s3_base_url(self) -> str:
        return f"https://{settings.AWS_S3_BUCKET}.s3.{settings.AWS_S3_REGION}.amazonaws.com/"

    def validate_image(self, content_type: str | None, size: int) -> str:
        """업로드 이미지의 타입과 크기를 검사하고 확장자를 반환합니다.

        Check the upload's content type and size; return the file extension.

        Raises:
            BadRequestError: 빈 파일, 지원하지 않는 타입, 크기 초과
                             (Empty file, unsupported type, or too large)
        """
        if size == 0:
            raise BadRequestError("Uploaded image is empty")
        ext: str | None = ALLOWED_IMAGE_TYPES.get((content_type or "").lower())
        if ext is None:
            raise BadRequestError(
                f"Unsupported image type: {content_type}. "
                f"Allowed: {', '.join(ALLOWED_IMAGE_TYPES)}"
            )
        if size > self.max_image_bytes:
            raise BadRequestError(f"Image exceeds the {settings.MAX_IMAGE_SIZE_MB} MB limit")
        return ext

    def save_image(self, data: bytes, content_type: str | None) -> str:
        """이미지를 저장하고 공개 URL을 반환합니다.

        Validate and store an image, returning the URL saved as photoUrl.
        """
        ext: str = self.validate_image(content_type, len(data))
        key: str = f"{uuid.uuid4().hex}.{ext}"

        if self.is_local:
            path: Path = self.uploads_dir / key
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            logger.info("Stored product image locally: %s (%d bytes)", path, len(data))
            return f"{settings.UPLOADS_URL_PREFIX}/{key}"

        s3_key: str = f"products/{key}"
        self.client.put_object(
            Bucket=settings.AWS_S3_BUCKET,
            Key=s3_key,
            Body=data,
            ContentType=content_type,
        )
        logger.info("Stored product image in S3: %s", s3_key)
        return f"{self._s3_base_url}{s3_key}"

    def _extract_key(self, file_url: str) -> str | None:
        """file URL에서 storage key를 추출합니다."""
        if self.is_local:
            prefix = f"{settings.UPLOADS_URL_PREFIX}/"
        else:
            prefix = self._s3_base_url
        if file_url.startswith(prefix):
            key = file_url[len(prefix):]
            # 경로 탈출 방지 — Reject keys that would escape the uploads directory
            if key and ".." not in key and not key.startswith("/"):
                return key
        return None

    def delete_image(self, file_url: str | None) -> None:
        """저장된 이미지를 삭제합니다. 실패해도 예외를 올리지 않습니다.

        Delete a stored image. Failures are logged, not raised, so that a
        missing file never blocks a product update or delete.
        """
        if not file_url:
            return
        key = self._extract_key(file_url)
        if key is None:
            logger.warning("Not deleting image with unrecognised URL: %s", file_url)
            return

        try:
            if self.is_local:
                (self.uploads_dir / key).unlink(missing_ok=True)
            else:
                self.client.delete_object(Bucket=settings.AWS_S3_BUCKET, Key=key)
            logger.info("Deleted product image: %s", key)
        except Exception:
            logger.warning("Failed to delete product image %s", key, exc_info=True)


storage_service: StorageService = StorageService()
