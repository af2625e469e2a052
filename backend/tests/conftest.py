"""Shared test fixtures: in-memory database, seeded rows and fake collaborators."""

import uuid
from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from maintenix.db.base import Base
from maintenix.db.models.machine import Machine
from maintenix.db.models.user import User
from maintenix.services.assignment_notifier import AssignmentNotifier
from maintenix.services.attachment_service import AttachmentService
from maintenix.services.maintenance_service import MaintenanceService

_TEST_DB_URL = "sqlite+aiosqlite://"
TEST_APP_URL = "http://app.test"


class FakeAttachmentStore:
    """In-memory AttachmentStore. Set fail_put / fail_delete to simulate outages."""

    BASE_URL = "http://storage.test/maintenix"

    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.deleted: list[str] = []
        self.fail_put = False
        self.fail_delete = False

    async def put(self, path: str, data: bytes, content_type: str) -> str:
        if self.fail_put:
            raise ConnectionError("storage unavailable")
        self.objects[path] = (data, content_type)
        return f"{self.BASE_URL}/{path}"

    async def delete(self, url: str) -> None:
        self.deleted.append(url)
        if self.fail_delete:
            raise ConnectionError("storage unavailable")
        prefix = f"{self.BASE_URL}/"
        if url.startswith(prefix):
            self.objects.pop(url[len(prefix):], None)


class RecordingSender:
    """NotificationSender that records every call. Set fail to make it raise."""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.fail = False

    async def send_assignment(self, **kwargs) -> None:
        if self.fail:
            raise RuntimeError("mail provider down")
        self.sent.append(kwargs)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory SQLite database per test (one shared connection)."""
    engine = create_async_engine(
        _TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    import maintenix.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def store() -> FakeAttachmentStore:
    return FakeAttachmentStore()


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def notifier(session_factory, sender) -> AssignmentNotifier:
    return AssignmentNotifier(session_factory=session_factory, sender=sender, app_url=TEST_APP_URL)


@pytest.fixture
def maintenance_service(session_factory, notifier) -> MaintenanceService:
    return MaintenanceService(session_factory=session_factory, notifier=notifier)


@pytest.fixture
def attachment_service(session_factory, store) -> AttachmentService:
    return AttachmentService(session_factory=session_factory, store=store, max_bytes=1024)


@pytest.fixture
def make_user(db_session):
    """Factory: insert a user and return it."""

    async def _make_user(
        name: str = "Ana Souza",
        email: str | None = "ana@example.com",
        active: bool = True,
    ) -> User:
        user = User(name=name, email=email, active=active)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_machine(db_session):
    """Factory: insert a machine and return it."""

    async def _make_machine(name: str = "Extruder DS") -> Machine:
        machine = Machine(name=name, line="Line 3", location="Sector B")
        db_session.add(machine)
        await db_session.commit()
        await db_session.refresh(machine)
        return machine

    return _make_machine


@pytest.fixture
async def machine(make_machine) -> Machine:
    return await make_machine()


@pytest.fixture
async def creator(make_user) -> User:
    return await make_user(name="Carlos Lima", email="carlos@example.com")


@pytest.fixture
async def responsible(make_user) -> User:
    return await make_user(name="Ana Souza", email="ana@example.com")


@pytest.fixture
def unknown_id() -> uuid.UUID:
    return uuid.uuid4()
