"""AttachmentService — before/after photos kept consistent across storage and DB.

The database is authoritative, storage is best-effort:
- add: upload the blob first, then write the metadata row. If the row
  write fails the blob is left orphaned (logged, not compensated).
- remove: try to delete the blob, then delete the row regardless of
  whether the blob delete worked.
"""

import re
import time
import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from maintenix.core.best_effort import run_best_effort
from maintenix.core.exceptions import InvalidAttachmentError, NotFoundError
from maintenix.db.models.maintenance_record import MaintenanceRecord
from maintenix.db.repository import MaintenanceRepository
from maintenix.domain.lifecycle import ensure_editable
from maintenix.schemas.maintenance import PhotoResponse, PhotoType
from maintenix.storage.attachment_store import AttachmentStore

logger = structlog.get_logger(__name__)

DEFAULT_MAX_PHOTO_BYTES: int = 5 * 1024 * 1024

PHOTO_FOLDERS: dict[PhotoType, str] = {
    PhotoType.BEFORE: "before",
    PhotoType.AFTER: "after",
}

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def sanitize_filename(filename: str | None) -> str:
    """Replace every character other than letters, digits, ``_``, ``.`` and ``-``."""
    safe = _UNSAFE_FILENAME_CHARS.sub("_", filename or "")
    return safe or "photo"


def build_object_name(
    record_id: uuid.UUID,
    photo_type: PhotoType,
    filename: str | None,
    timestamp_ms: int | None = None,
) -> str:
    """Storage path: maintenance-records/{record_id}/{before|after}/{ms}-{suffix}-{safe_name}.

    The random suffix keeps same-named uploads in the same millisecond apart.
    """
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    folder = PHOTO_FOLDERS[PhotoType(photo_type)]
    suffix = uuid.uuid4().hex[:8]
    return f"maintenance-records/{record_id}/{folder}/{timestamp_ms}-{suffix}-{sanitize_filename(filename)}"


class AttachmentService:
    """Service layer for maintenance photo upload, listing and removal."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        store: AttachmentStore,
        max_bytes: int = DEFAULT_MAX_PHOTO_BYTES,
    ):
        self.session_factory = session_factory
        self.store = store
        self.max_bytes = max_bytes

    def validate(self, data: bytes | None, content_type: str | None) -> None:
        """Reject missing, oversized and non-image uploads.

        Raises:
            InvalidAttachmentError: with the reason in ``detail``
        """
        if not data:
            raise InvalidAttachmentError("File not provided")
        if len(data) > self.max_bytes:
            raise InvalidAttachmentError(f"File too large: {len(data)} bytes > {self.max_bytes}")
        if not content_type or not content_type.lower().startswith("image/"):
            raise InvalidAttachmentError("File must be an image")

    async def add_photo(
        self,
        machine_id: uuid.UUID,
        record_id: uuid.UUID,
        photo_type: PhotoType,
        data: bytes,
        content_type: str,
        filename: str | None,
        created_by: uuid.UUID,
    ) -> PhotoResponse:
        """Upload a photo and record its metadata.

        Allowed on PENDING and DONE records alike.

        Raises:
            NotFoundError: record missing under that machine
            InvalidAttachmentError: payload empty, too large or not an image
        """
        async with self.session_factory() as session:
            await self._get_record(MaintenanceRepository(session), machine_id, record_id)

        self.validate(data, content_type)

        object_name = build_object_name(record_id, photo_type, filename)
        file_url = await self.store.put(object_name, data, content_type)

        try:
            async with self.session_factory() as session:
                photo = await MaintenanceRepository(session).insert_photo(
                    maintenance_record_id=record_id,
                    type=PhotoType(photo_type).value,
                    file_url=file_url,
                    created_by=created_by,
                )
                await session.commit()
                await session.refresh(photo)
                response = PhotoResponse.model_validate(photo)
        except Exception as exc:
            logger.error(
                "photo_metadata_write_failed",
                record_id=str(record_id),
                file_url=file_url,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise

        logger.info(
            "maintenance_photo_uploaded",
            photo_id=str(response.id),
            record_id=str(record_id),
            type=response.type.value,
            size_bytes=len(data),
        )
        return response

    async def list_photos(self, machine_id: uuid.UUID, record_id: uuid.UUID) -> list[PhotoResponse]:
        """List a record's photos, newest first."""
        async with self.session_factory() as session:
            repo = MaintenanceRepository(session)
            await self._get_record(repo, machine_id, record_id)
            photos = await repo.list_photos(record_id)
            return [PhotoResponse.model_validate(photo) for photo in photos]

    async def remove_photo(
        self,
        machine_id: uuid.UUID,
        record_id: uuid.UUID,
        photo_id: uuid.UUID,
    ) -> PhotoResponse:
        """Delete a photo from a PENDING record.

        A failing blob delete is logged and ignored; the row is deleted anyway.

        Raises:
            NotFoundError: record or photo missing
            AlreadyFinishedError: record is DONE
        """
        async with self.session_factory() as session:
            repo = MaintenanceRepository(session)
            record = await self._get_record(repo, machine_id, record_id)
            ensure_editable(record.status)

            photo = await repo.find_photo(record_id, photo_id)
            if photo is None:
                raise NotFoundError("photo")
            response = PhotoResponse.model_validate(photo)

            blob_deleted = await run_best_effort(
                lambda: self.store.delete(photo.file_url),
                "photo_blob_delete_failed",
                photo_id=str(photo_id),
                record_id=str(record_id),
                file_url=photo.file_url,
            )

            await repo.delete_photo(photo_id)
            await session.commit()

        logger.info(
            "maintenance_photo_removed",
            photo_id=str(photo_id),
            record_id=str(record_id),
            blob_deleted=blob_deleted,
        )
        return response

    async def _get_record(
        self,
        repo: MaintenanceRepository,
        machine_id: uuid.UUID,
        record_id: uuid.UUID,
    ) -> MaintenanceRecord:
        record = await repo.find_record(machine_id, record_id)
        if record is None:
            raise NotFoundError("record")
        return record
