"""
In-memory stand-in for a SQL connection.

This does NOT demonstrate real database usage. It understands just enough
statement shapes to let the grades routes run without a database server:

- ``SELECT * ...`` with no parameters returns every row
- ``SELECT ...`` with a string first parameter returns rows for that course
- ``DELETE ...`` with no parameters removes every row
- ``INSERT ...`` with ``(course, grade)`` parameters appends a row

Every other statement is acknowledged with an empty success result.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from shared.logging import get_logger


COLUMNS = ("course", "grade")


class ResultKind(str, Enum):
    RESULT_SET = "resultSet"
    SUCCESS_NO_DATA = "successNoData"
    ERROR = "error"


@dataclass(frozen=True)
class ResultSet:
    """Rows returned by a query, in insertion order."""

    rows: Tuple[Tuple[Any, ...], ...]
    titles: Tuple[str, ...] = COLUMNS

    def __iter__(self) -> Iterator[Tuple[Any, ...]]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def as_dicts(self) -> List[dict]:
        return [dict(zip(self.titles, row)) for row in self.rows]


@dataclass(frozen=True)
class QueryResult:
    kind: ResultKind
    result_set: Optional[ResultSet] = None
    error: Optional[str] = None

    @classmethod
    def rows(cls, rows: Sequence[Tuple[Any, ...]]) -> "QueryResult":
        return cls(ResultKind.RESULT_SET, result_set=ResultSet(tuple(rows)))

    @classmethod
    def success_no_data(cls) -> "QueryResult":
        return cls(ResultKind.SUCCESS_NO_DATA)

    @classmethod
    def failure(cls, error: str) -> "QueryResult":
        return cls(ResultKind.ERROR, error=error)

    @property
    def success(self) -> bool:
        return self.kind is not ResultKind.ERROR


class DummyConnection:
    """Grades held in a list, guarded by a lock for concurrent requests."""

    def __init__(self):
        self._grades: List[Tuple[str, int]] = []
        self._lock = threading.Lock()
        self.logger = get_logger("starter.database.connection")

    @property
    def is_connected(self) -> bool:
        return True

    def execute(self, query: str, parameters: Optional[Sequence[Any]] = None) -> QueryResult:
        """Execute ``query``; see the module docstring for supported shapes."""
        components = query.split()
        if not components:
            return QueryResult.failure("Empty query")

        statement = components[0].upper()
        self.logger.debug("Executing query", statement=statement, parameterized=parameters is not None)

        with self._lock:
            if parameters is None:
                return self._execute_plain(statement, components)
            return self._execute_parameterized(statement, list(parameters))

    def _execute_plain(self, statement: str, components: List[str]) -> QueryResult:
        if statement == "SELECT" and len(components) > 1 and components[1] == "*":
            return QueryResult.rows(self._grades)
        if statement == "DELETE":
            self._grades = []
        return QueryResult.success_no_data()

    def _execute_parameterized(self, statement: str, parameters: List[Any]) -> QueryResult:
        if statement == "INSERT":
            if len(parameters) >= 2 and _is_course(parameters[0]) and _is_grade(parameters[1]):
                self._grades.append((parameters[0], parameters[1]))
            return QueryResult.success_no_data()
        if statement == "SELECT" and parameters and _is_course(parameters[0]):
            course = parameters[0]
            return QueryResult.rows([row for row in self._grades if row[0] == course])
        return QueryResult.success_no_data()


def _is_course(value: Any) -> bool:
    return isinstance(value, str)


def _is_grade(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
