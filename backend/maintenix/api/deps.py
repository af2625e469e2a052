"""FastAPI dependency providers for the maintenance services.

Override these in tests via app.dependency_overrides.
"""

from functools import lru_cache

from maintenix.core.config import get_settings
from maintenix.db.base import get_session_factory
from maintenix.notifications.mail import NotificationSender, ResendMailSender
from maintenix.services.assignment_notifier import AssignmentNotifier
from maintenix.services.attachment_service import AttachmentService
from maintenix.services.maintenance_service import MaintenanceService
from maintenix.storage.attachment_store import AttachmentStore, S3AttachmentStore


@lru_cache
def get_attachment_store() -> AttachmentStore:
    return S3AttachmentStore.from_settings(get_settings())


@lru_cache
def get_notification_sender() -> NotificationSender:
    return ResendMailSender.from_settings(get_settings())


def get_maintenance_service() -> MaintenanceService:
    session_factory = get_session_factory()
    notifier = AssignmentNotifier(
        session_factory=session_factory,
        sender=get_notification_sender(),
        app_url=get_settings().mail_app_url,
    )
    return MaintenanceService(session_factory=session_factory, notifier=notifier)


def get_attachment_service() -> AttachmentService:
    return AttachmentService(
        session_factory=get_session_factory(),
        store=get_attachment_store(),
        max_bytes=get_settings().photo_max_bytes,
    )
