from __future__ import annotations
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from sqlalchemy import Boolean, DateTime, Integer, String, Text, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from tasklist.domain.errors import PersistenceError
from tasklist.domain.task_models import Task, TaskPriority, decode_task_row


class Base(DeclarativeBase):
    pass


class TaskRow(Base):
    __tablename__ = "todos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    done: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    priority: Mapped[str] = mapped_column(String(10), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def to_domain(self) -> Task:
        return decode_task_row(
            {
                "id": self.id,
                "text": self.text,
                "done": self.done,
                "priority": self.priority,
                "created_at": self.created_at,
            }
        )


def make_sqlite_url(db_path: str) -> str:
    # db_path like "./data/tasklist.db"
    p = Path(db_path).resolve()
    p.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{p.as_posix()}"


class SQLiteTaskRepo:
    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.sessionmaker: async_sessionmaker[AsyncSession] = async_sessionmaker(engine, expire_on_commit=False)

    @classmethod
    def from_path(cls, db_path: str) -> "SQLiteTaskRepo":
        return cls(create_async_engine(make_sqlite_url(db_path)))

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def fetch_all(self) -> List[Task]:
        try:
            async with self.sessionmaker() as session:
                res = await session.execute(
                    select(TaskRow).order_by(TaskRow.created_at.desc(), TaskRow.id.desc())
                )
                rows = res.scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"select failed: {e}") from e
        return [r.to_domain() for r in rows]

    async def insert(self, text: str, done: bool, priority: TaskPriority) -> Task:
        row = TaskRow(
            text=text,
            done=done,
            priority=TaskPriority(priority).value,
            created_at=datetime.now(timezone.utc),
        )
        try:
            async with self.sessionmaker() as session:
                session.add(row)
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"insert failed: {e}") from e
        return row.to_domain()

    async def update_done(self, task_id: int, done: bool) -> None:
        try:
            async with self.sessionmaker() as session:
                res = await session.execute(update(TaskRow).where(TaskRow.id == task_id).values(done=done))
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"update failed: {e}") from e
        if res.rowcount == 0:
            raise PersistenceError(f"no task row with id {task_id}")

    async def delete_by_id(self, task_id: int) -> None:
        try:
            async with self.sessionmaker() as session:
                res = await session.execute(delete(TaskRow).where(TaskRow.id == task_id))
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"delete failed: {e}") from e
        if res.rowcount == 0:
            raise PersistenceError(f"no task row with id {task_id}")

    async def close(self) -> None:
        await self.engine.dispose()
