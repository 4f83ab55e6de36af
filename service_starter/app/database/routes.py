"""
Grades routes backed by the table binding.

To run against a real database, swap ``DummyConnection`` for a connection
object exposing the same ``execute(query, parameters)`` contract.
"""

from typing import List

from fastapi import Depends

from .models import DatabaseError, Grade, GradesQuery, GradeTable


def initialize_database_routes(service, grades: GradeTable):
    """Create the grades table and register the ``/database`` routes."""
    app = service.app

    try:
        grades.create_table()
    except DatabaseError as e:
        service.logger.error("Failed to create table in database", error=e.message)

    @app.get("/database", response_model=List[Grade])
    async def load_grades(query: GradesQuery = Depends()):
        """Return every grade, optionally filtered by course."""
        return grades.find_all(query)

    @app.post("/database", response_model=Grade, status_code=201)
    async def save_grade(grade: Grade):
        """Store a grade."""
        return grades.save(grade)

    @app.delete("/database", status_code=204)
    async def delete_all_grades():
        """Remove every grade."""
        grades.delete_all()

    @app.delete("/database/{grade_id}", status_code=204)
    async def delete_grade(grade_id: int):
        """Remove a single grade by id."""
        grades.delete(grade_id)
