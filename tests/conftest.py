import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import uuid  # noqa: E402
from datetime import date, datetime, timedelta  # noqa: E402
from typing import AsyncGenerator, Dict, Optional  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import func, select  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.auth.security import create_access_token  # noqa: E402
from app.core.models import (  # noqa: E402
    Grade,
    Period,
    Room,
    School,
    SchoolClass,
    SchoolEvent,
    Subject,
    Teacher,
    TeacherSubject,
    Timetable,
)
from app.db.session import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def csv_bytes(*lines: str) -> bytes:
    """Join CSV lines into an uploaded file body."""
    return ("\n".join(lines) + "\n").encode("utf-8")


async def count(db: AsyncSession, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


@pytest_asyncio.fixture()
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database per test; overrides the FastAPI get_db dependency."""
    # StaticPool: every connection is the same in-memory database
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session

    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest_asyncio.fixture()
async def school(db_session: AsyncSession) -> School:
    obj = School(name="Lycée Pilote")
    db_session.add(obj)
    await db_session.commit()
    return obj


class Factory:
    """Seeds school-scoped rows. Each call commits so the data is 'already in the store'."""

    def __init__(self, db: AsyncSession, school: School) -> None:
        self.db = db
        self.school = school
        self._clock = datetime(2024, 1, 1)

    def _created_at(self) -> datetime:
        # strictly increasing so snapshot order is insertion order
        self._clock += timedelta(seconds=1)
        return self._clock

    async def _save(self, obj):
        self.db.add(obj)
        await self.db.commit()
        return obj

    async def subject(self, name: str, **kw) -> Subject:
        return await self._save(
            Subject(school_id=self.school.id, name=name, created_at=self._created_at(), **kw)
        )

    async def teacher(self, name: str, subjects=(), **kw) -> Teacher:
        teacher = await self._save(
            Teacher(school_id=self.school.id, name=name, created_at=self._created_at(), **kw)
        )
        for idx, subject in enumerate(subjects):
            self.db.add(TeacherSubject(teacher_id=teacher.id, subject_id=subject.id, is_primary=idx == 0))
        await self.db.commit()
        return teacher

    async def grade(self, name: str, level: int = 1) -> Grade:
        return await self._save(
            Grade(school_id=self.school.id, name=name, level=level, created_at=self._created_at())
        )

    async def school_class(self, name: str, grade: Optional[Grade] = None) -> SchoolClass:
        return await self._save(
            SchoolClass(
                school_id=self.school.id,
                name=name,
                grade_id=grade.id if grade else None,
                created_at=self._created_at(),
            )
        )

    async def room(self, name: str, **kw) -> Room:
        return await self._save(Room(school_id=self.school.id, name=name, created_at=self._created_at(), **kw))

    async def period(self, name: str, order: int = 0) -> Period:
        return await self._save(
            Period(school_id=self.school.id, name=name, order=order, created_at=self._created_at())
        )

    async def timetable(self, name: str = "2024-2025") -> Timetable:
        return await self._save(Timetable(school_id=self.school.id, name=name, created_at=self._created_at()))

    async def event(self, title: str, start: date, end: Optional[date] = None, **kw) -> SchoolEvent:
        return await self._save(
            SchoolEvent(
                school_id=self.school.id,
                title=title,
                start_date=start,
                end_date=end or start,
                created_at=self._created_at(),
                **kw,
            )
        )


@pytest.fixture()
def make(db_session: AsyncSession, school: School) -> Factory:
    return Factory(db_session, school)


def auth_headers_for(school_id: uuid.UUID, role: str = "ADMIN", permissions: Optional[Dict] = None) -> Dict[str, str]:
    token = create_access_token(
        subject={
            "user_id": str(uuid.uuid4()),
            "school_id": str(school_id),
            "role": role,
            "permissions": permissions or {},
        }
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_headers(school: School) -> Dict[str, str]:
    return auth_headers_for(school.id)


@pytest_asyncio.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
