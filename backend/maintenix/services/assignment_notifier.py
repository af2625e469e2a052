"""AssignmentNotifier — emails the responsible of a newly (re)assigned record."""

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from maintenix.db.repository import MaintenanceRepository
from maintenix.domain.labels import format_category, format_priority, format_shift
from maintenix.notifications.mail import NotificationSender

logger = structlog.get_logger(__name__)

DEFAULT_MACHINE_NAME = "Machine"


class AssignmentNotifier:
    """Builds the assignment email context and hands it to the sender.

    Re-reads the record in its own session, so it can run after the
    triggering write has committed. Records without a resolvable
    responsible email are skipped silently. Sender errors propagate;
    callers wrap notify() with run_best_effort().
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        sender: NotificationSender,
        app_url: str,
    ):
        self.session_factory = session_factory
        self.sender = sender
        self.app_url = app_url.rstrip("/")

    def build_record_url(self, machine_id: uuid.UUID, record_id: uuid.UUID) -> str:
        return f"{self.app_url}/machines/{machine_id}/maintenance-records/{record_id}"

    async def notify(self, record_id: uuid.UUID) -> bool:
        """Send the assignment email for a record.

        Returns:
            True if an email was handed to the sender, False if skipped.
        """
        async with self.session_factory() as session:
            context = await MaintenanceRepository(session).load_assignment_context(record_id)

        if context is None:
            logger.info("assignment_notification_skipped", record_id=str(record_id), reason="record_not_found")
            return False
        if not context.responsible_email:
            logger.info("assignment_notification_skipped", record_id=str(record_id), reason="no_responsible_email")
            return False

        await self.sender.send_assignment(
            to=context.responsible_email,
            name=context.responsible_name or context.responsible_email,
            machine_name=context.machine_name or DEFAULT_MACHINE_NAME,
            priority_label=format_priority(context.priority),
            category_label=format_category(context.category),
            shift_label=format_shift(context.shift),
            problem_description=context.problem_description,
            action_url=self.build_record_url(context.machine_id, context.record_id),
        )

        logger.info("assignment_notification_sent", record_id=str(record_id))
        return True
