import logging
from datetime import datetime, timezone

from docstore.config import Settings
from docstore.exceptions import BadRequestError, FileSearchError, FileUploadError, InternalError
from docstore.models import FileRecord
from docstore.storage import ObjectSummary, S3ObjectStore

logger = logging.getLogger(__name__)

UPLOAD_FAILED_MESSAGE = "Failed to upload file, please try again"
SEARCH_FAILED_MESSAGE = "Failed to search files"


def build_file_key(user_name: str, file_name: str) -> str:
    return f"{user_name}/{file_name}"


def extract_file_name(key: str) -> str:
    return key.rsplit("/", 1)[-1]


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class StorageService:
    def __init__(self, store: S3ObjectStore, settings: Settings):
        self.store = store
        self.url_expiry_seconds = settings.download_url_expiry_seconds
        self.list_max_keys = settings.list_max_keys

    def search_files(
        self,
        user_name: str | None,
        search_term: str | None = None,
        page: int = 0,
        size: int = 10,
    ) -> list[FileRecord]:
        try:
            if is_blank(user_name):
                raise BadRequestError("Username cannot be null or empty")
            if page < 0 or size < 0:
                raise BadRequestError("Page and size must not be negative")

            objects = self.store.list_objects(prefix=f"{user_name}/", max_keys=self.list_max_keys)
            term = None if is_blank(search_term) else search_term.lower()
            matches = [
                obj
                for obj in objects
                if not obj.key.endswith("/") and (term is None or term in obj.key.lower())
            ]

            start = page * size
            if start >= len(matches):
                return []
            end = min(start + size, len(matches))
            return [self._with_download_url(self._to_record(obj)) for obj in matches[start:end]]
        except Exception as exc:
            logger.error("Error searching files for user %s with term %s: %s", user_name, search_term, exc)
            raise FileSearchError(SEARCH_FAILED_MESSAGE) from exc

    def upload_file(
        self,
        user_name: str | None,
        file_content: bytes | None,
        file_name: str | None,
        content_type: str | None,
        size: int | None = None,
    ) -> FileRecord:
        try:
            if is_blank(user_name):
                raise BadRequestError("Username cannot be null or empty")
            if not file_content:
                raise BadRequestError("File cannot be null or empty")
            if is_blank(file_name):
                raise BadRequestError("Filename cannot be null or empty")

            key = build_file_key(user_name, file_name)
            content_length = size if size is not None else len(file_content)
            self.store.put_object(
                key=key,
                body=file_content,
                content_type=content_type or "application/octet-stream",
                content_length=content_length,
            )
            logger.info("File uploaded successfully: %s", key)

            record = FileRecord(
                file_name=file_name,
                file_key=key,
                file_size=content_length,
                last_modified=datetime.now(timezone.utc),
            )
            return self._with_download_url(record)
        except Exception as exc:
            logger.error("Error uploading file for user %s: %s", user_name, exc)
            raise FileUploadError(UPLOAD_FAILED_MESSAGE) from exc

    def delete_file(self, user_name: str | None, file_name: str | None) -> None:
        # check-then-delete is not atomic
        try:
            if is_blank(user_name):
                raise BadRequestError("Username cannot be null or empty")
            if is_blank(file_name):
                raise BadRequestError("Filename cannot be null or empty")

            key = build_file_key(user_name, file_name)
            if not self.file_exists(key):
                raise BadRequestError(f"File not found: {file_name}")

            self.store.delete_object(key)
            logger.info("File deleted successfully: %s", key)
        except BadRequestError:
            raise
        except Exception as exc:
            logger.error("Error deleting file %s for user %s: %s", file_name, user_name, exc)
            raise InternalError("Failed to delete file") from exc

    def generate_download_url(self, file_key: str) -> str:
        try:
            return self.store.presign_get_object(file_key, expires_in=self.url_expiry_seconds)
        except Exception as exc:
            logger.error("Error generating download URL for file %s: %s", file_key, exc)
            raise InternalError("Failed to generate download URL") from exc

    def file_exists(self, file_key: str) -> bool:
        try:
            return self.store.head_object(file_key) is not None
        except Exception as exc:
            logger.error("Error checking file existence for key %s: %s", file_key, exc)
            return False

    def _with_download_url(self, record: FileRecord) -> FileRecord:
        try:
            download_url = self.generate_download_url(record.file_key)
        except InternalError as exc:
            logger.warning("Could not generate download URL for file %s: %s", record.file_key, exc)
            return record
        return record.model_copy(update={"download_url": download_url})

    @staticmethod
    def _to_record(obj: ObjectSummary) -> FileRecord:
        return FileRecord(
            file_name=extract_file_name(obj.key),
            file_key=obj.key,
            file_size=obj.size,
            last_modified=obj.last_modified,
        )
