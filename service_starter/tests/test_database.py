"""
Tests for the in-memory connection and the grades table binding.
"""

import threading

import pytest

from service_starter.app.database.connection import DummyConnection, ResultKind
from service_starter.app.database.models import DatabaseError, Grade, GradesQuery, GradeTable


@pytest.fixture
def connection():
    return DummyConnection()


@pytest.fixture
def grades(connection):
    table = GradeTable(connection)
    table.create_table()
    return table


class TestDummyConnection:
    """Test cases for DummyConnection."""

    def test_insert_then_select_all(self, connection):
        connection.execute('INSERT INTO "grades" ("course", "grade") VALUES (?1, ?2)', ["maths", 90])
        connection.execute('INSERT INTO "grades" ("course", "grade") VALUES (?1, ?2)', ["art", 70])

        result = connection.execute('SELECT * FROM "grades"')

        assert result.kind is ResultKind.RESULT_SET
        assert result.result_set.titles == ("course", "grade")
        assert list(result.result_set) == [("maths", 90), ("art", 70)]

    def test_select_filtered_by_course(self, connection):
        for course, grade in [("maths", 90), ("art", 70), ("maths", 60)]:
            connection.execute("INSERT INTO grades VALUES (?1, ?2)", [course, grade])

        result = connection.execute("SELECT * FROM grades WHERE course = ?1", ["maths"])

        assert result.result_set.as_dicts() == [
            {"course": "maths", "grade": 90},
            {"course": "maths", "grade": 60},
        ]

    def test_delete_without_parameters_clears_everything(self, connection):
        connection.execute("INSERT INTO grades VALUES (?1, ?2)", ["maths", 90])

        result = connection.execute("DELETE FROM grades")

        assert result.kind is ResultKind.SUCCESS_NO_DATA
        assert len(connection.execute("SELECT * FROM grades").result_set) == 0

    @pytest.mark.parametrize("parameters", [["maths"], ["maths", "90"], [90, "maths"], ["maths", True]])
    def test_insert_with_wrong_parameters_is_ignored(self, connection, parameters):
        result = connection.execute("INSERT INTO grades VALUES (?1, ?2)", parameters)

        assert result.kind is ResultKind.SUCCESS_NO_DATA
        assert len(connection.execute("SELECT * FROM grades").result_set) == 0

    @pytest.mark.parametrize("query, parameters", [
        ("CREATE TABLE grades (course text)", None),
        ("UPDATE grades SET grade = 1", None),
        ("SELECT course FROM grades", None),
        ("DELETE FROM grades WHERE id = ?1", [1]),
        ("SELECT * FROM grades WHERE grade = ?1", [90]),
    ])
    def test_unsupported_shapes_are_acknowledged(self, connection, query, parameters):
        connection.execute("INSERT INTO grades VALUES (?1, ?2)", ["maths", 90])

        result = connection.execute(query, parameters)

        assert result.kind is ResultKind.SUCCESS_NO_DATA
        assert result.success
        assert len(connection.execute("SELECT * FROM grades").result_set) == 1

    def test_empty_query_is_an_error(self, connection):
        result = connection.execute("   ")

        assert result.kind is ResultKind.ERROR
        assert not result.success

    def test_concurrent_inserts(self, connection):
        def insert_many(course):
            for grade in range(200):
                connection.execute("INSERT INTO grades VALUES (?1, ?2)", [course, grade])

        threads = [threading.Thread(target=insert_many, args=(f"course-{i}",)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(connection.execute("SELECT * FROM grades").result_set) == 1600


class TestGradeTable:
    """Test cases for GradeTable."""

    def test_save_and_find_all(self, grades):
        grades.save(Grade(course="maths", grade=90))
        grades.save(Grade(course="art", grade=70))

        assert grades.find_all() == [Grade(course="maths", grade=90), Grade(course="art", grade=70)]

    def test_find_all_matching_course(self, grades):
        grades.save(Grade(course="maths", grade=90))
        grades.save(Grade(course="art", grade=70))

        assert grades.find_all(GradesQuery(course="art")) == [Grade(course="art", grade=70)]
        assert grades.find_all(GradesQuery()) == grades.find_all()

    def test_delete_all(self, grades):
        grades.save(Grade(course="maths", grade=90))

        grades.delete_all()

        assert grades.find_all() == []

    def test_delete_one_is_acknowledged_without_removing(self, grades):
        grades.save(Grade(course="maths", grade=90))

        grades.delete(1)

        assert len(grades.find_all()) == 1

    def test_error_result_raises(self, grades):
        with pytest.raises(DatabaseError) as exc_info:
            grades._execute("")
        assert exc_info.value.status_code == 500
