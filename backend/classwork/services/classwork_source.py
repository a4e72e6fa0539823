import asyncio
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

import httpx
from postgrest.exceptions import APIError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from supabase import Client

from classwork.core.config import Settings
from classwork.core.database import Database
from classwork.core.supabase import create_supabase_client
from classwork.models import Assignment, AssignmentStudent, ClassMember, Quiz, QuizStudent, StreamItem, User
from classwork.schemas.classwork import ClassworkSnapshot
from classwork.services.errors import ClassworkSourceError
from classwork.services.snapshot import build_snapshot, load_snapshot

logger = logging.getLogger(__name__)


class ClassworkSource:
    """Supplies the in-memory records the visibility resolver works on.

    ``load(student_id)`` may narrow the read to the student's classes; with
    no student every row is loaded.
    """

    name = "base"

    async def load(self, student_id: Optional[str] = None) -> ClassworkSnapshot:
        raise NotImplementedError

    async def close(self):
        pass


class JsonClassworkSource(ClassworkSource):
    name = "json"

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def load(self, student_id: Optional[str] = None) -> ClassworkSnapshot:
        if not self.path.exists():
            raise ClassworkSourceError(f"Snapshot file not found: {self.path}")
        return await asyncio.to_thread(load_snapshot, self.path)


class SqlClassworkSource(ClassworkSource):
    name = "sql"

    def __init__(self, database: Database):
        self.database = database

    async def load(self, student_id: Optional[str] = None) -> ClassworkSnapshot:
        try:
            async with self.database.session() as session:
                if student_id is None:
                    return await self._load_all(session)
                return await self._load_for_student(session, student_id)
        except SQLAlchemyError as e:
            raise ClassworkSourceError(f"Database query failed: {e}") from e

    async def _all(self, session: AsyncSession, query) -> List[Any]:
        result = await session.execute(query)
        return list(result.scalars().all())

    async def _load_all(self, session: AsyncSession) -> ClassworkSnapshot:
        return build_snapshot(
            memberships=await self._all(session, select(ClassMember)),
            stream_items=await self._all(session, select(StreamItem)),
            assignments=await self._all(session, select(Assignment)),
            quizzes=await self._all(session, select(Quiz)),
            assignment_students=await self._all(session, select(AssignmentStudent)),
            quiz_students=await self._all(session, select(QuizStudent)),
            users=await self._all(session, select(User)),
        )

    async def _load_for_student(self, session: AsyncSession, student_id: str) -> ClassworkSnapshot:
        memberships = await self._all(session, select(ClassMember).where(ClassMember.user_id == student_id))
        class_ids = {m.class_id for m in memberships}
        if not class_ids:
            logger.info(f"Student {student_id} is not enrolled in any class")
            return build_snapshot(
                memberships=memberships,
                users=await self._all(session, select(User).where(User.id == student_id)),
            )

        stream_items = await self._all(
            session,
            select(StreamItem)
            .where(StreamItem.class_id.in_(sorted(class_ids)))
            .order_by(StreamItem.created_at),
        )
        stream_item_ids = [s.id for s in stream_items]

        return build_snapshot(
            memberships=memberships,
            stream_items=stream_items,
            assignments=await self._all(
                session,
                select(Assignment)
                .where(Assignment.stream_item_id.in_(stream_item_ids))
                .order_by(Assignment.created_at),
            ),
            quizzes=await self._all(
                session,
                select(Quiz)
                .where(Quiz.stream_item_id.in_(stream_item_ids))
                .order_by(Quiz.created_at),
            ),
            assignment_students=await self._all(
                session, select(AssignmentStudent).where(AssignmentStudent.student_id == student_id)
            ),
            quiz_students=await self._all(
                session, select(QuizStudent).where(QuizStudent.student_id == student_id)
            ),
            users=await self._all(session, select(User).where(User.id == student_id)),
        )

    async def close(self):
        await self.database.dispose()


class SupabaseClassworkSource(ClassworkSource):
    """Reads the same tables through the Supabase REST API.

    PostgREST caps every response (1000 rows unless configured otherwise), so
    each table is read in ``page_size`` pages ordered by id until a short page
    comes back. Student-scoped loads narrow stream items and work to the
    student's classes, as the SQL source does.
    """

    name = "supabase"

    # Ids per ``in`` filter; keeps the request URL short
    CHUNK_SIZE = 100

    def __init__(self, client: Client, page_size: int = 1000):
        self.client = client
        self.page_size = page_size

    def _select(self, table: str, column: Optional[str] = None, value: Any = None) -> List[dict]:
        rows: List[dict] = []
        start = 0
        while True:
            query = self.client.table(table).select("*")
            if isinstance(value, (list, tuple)):
                query = query.in_(column, list(value))
            elif value is not None:
                query = query.eq(column, value)
            response = query.order("id").range(start, start + self.page_size - 1).execute()
            page = response.data or []
            rows.extend(page)
            if len(page) < self.page_size:
                return rows
            start += self.page_size

    async def _fetch(self, table: str, column: Optional[str] = None, value: Any = None) -> List[dict]:
        rows = await asyncio.to_thread(self._select, table, column, value)
        logger.debug(f"Fetched {len(rows)} rows from {table}")
        return rows

    async def _fetch_in(self, table: str, column: str, values: List[str]) -> List[dict]:
        rows: List[dict] = []
        for i in range(0, len(values), self.CHUNK_SIZE):
            rows.extend(await self._fetch(table, column, values[i:i + self.CHUNK_SIZE]))
        return rows

    async def load(self, student_id: Optional[str] = None) -> ClassworkSnapshot:
        try:
            if student_id is None:
                return await self._load_all()
            return await self._load_for_student(student_id)
        except (APIError, httpx.HTTPError) as e:
            raise ClassworkSourceError(f"Supabase request failed: {e}") from e

    async def _load_all(self) -> ClassworkSnapshot:
        return build_snapshot(
            memberships=await self._fetch("class_members"),
            stream_items=await self._fetch("stream_items"),
            assignments=await self._fetch("assignments"),
            quizzes=await self._fetch("quizzes"),
            assignment_students=await self._fetch("assignment_students"),
            quiz_students=await self._fetch("quiz_students"),
            users=await self._fetch("users"),
        )

    async def _load_for_student(self, student_id: str) -> ClassworkSnapshot:
        memberships = await self._fetch("class_members", "user_id", student_id)
        users = await self._fetch("users", "id", student_id)
        class_ids = sorted({m["class_id"] for m in memberships if m.get("class_id")})
        if not class_ids:
            logger.info(f"Student {student_id} is not enrolled in any class")
            return build_snapshot(memberships=memberships, users=users)

        stream_items = await self._fetch_in("stream_items", "class_id", class_ids)
        stream_item_ids = sorted({s["id"] for s in stream_items if s.get("id")})

        return build_snapshot(
            memberships=memberships,
            stream_items=stream_items,
            assignments=await self._fetch_in("assignments", "stream_item_id", stream_item_ids),
            quizzes=await self._fetch_in("quizzes", "stream_item_id", stream_item_ids),
            assignment_students=await self._fetch("assignment_students", "student_id", student_id),
            quiz_students=await self._fetch("quiz_students", "student_id", student_id),
            users=users,
        )


def create_classwork_source(settings: Settings) -> ClassworkSource:
    """Build the source named by ``CLASSWORK_SOURCE``"""
    source = settings.CLASSWORK_SOURCE.lower()
    if source == "json":
        return JsonClassworkSource(settings.CLASSWORK_DATA_FILE)
    if source == "sql":
        return SqlClassworkSource(Database.from_settings(settings))
    if source == "supabase":
        return SupabaseClassworkSource(create_supabase_client(settings))
    raise ClassworkSourceError(f"Unknown classwork source: {settings.CLASSWORK_SOURCE}")
