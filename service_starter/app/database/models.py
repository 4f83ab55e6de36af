"""
Grade model and its table binding.
"""

from typing import List, Optional

from pydantic import BaseModel

from shared.errors import ServiceException
from shared.logging import get_logger
from .connection import DummyConnection, QueryResult


class DatabaseError(ServiceException):
    """A query that came back with an error result."""

    status_code = 500

    def __init__(self, message: str, query: str):
        super().__init__("DATABASE_ERROR", message, {"query": query})


class Grade(BaseModel):
    course: str
    grade: int


class GradesQuery(BaseModel):
    """Optional filters accepted by ``GET /database``."""
    course: Optional[str] = None


class GradeTable:
    """Builds the SQL for ``Grade`` rows and runs it on a connection."""

    name = "grades"

    def __init__(self, connection: DummyConnection, metrics=None):
        self.connection = connection
        self.metrics = metrics
        self.logger = get_logger("starter.database.grades")

    def _execute(self, query: str, parameters=None) -> QueryResult:
        result = self.connection.execute(query, parameters)
        if self.metrics is not None:
            self.metrics.increment_counter("database_queries_total", statement=query.split(" ", 1)[0])
        if not result.success:
            self.logger.error("Query failed", query=query, error=result.error)
            raise DatabaseError(result.error or "Query failed", query)
        return result

    def create_table(self) -> None:
        self._execute(
            f'CREATE TABLE "{self.name}" '
            '("id" integer PRIMARY KEY AUTOINCREMENT, "course" text NOT NULL, "grade" integer NOT NULL)'
        )

    def find_all(self, query: Optional[GradesQuery] = None) -> List[Grade]:
        if query is not None and query.course is not None:
            result = self._execute(f'SELECT * FROM "{self.name}" WHERE "{self.name}"."course" = ?1', [query.course])
        else:
            result = self._execute(f'SELECT * FROM "{self.name}"')

        if result.result_set is None:
            return []
        return [Grade.model_validate(row) for row in result.result_set.as_dicts()]

    def save(self, grade: Grade) -> Grade:
        self._execute(
            f'INSERT INTO "{self.name}" ("course", "grade") VALUES (?1, ?2)',
            [grade.course, grade.grade]
        )
        return grade

    def delete_all(self) -> None:
        self._execute(f'DELETE FROM "{self.name}"')

    def delete(self, grade_id: int) -> None:
        self._execute(f'DELETE FROM "{self.name}" WHERE "{self.name}"."id" = ?1', [grade_id])
