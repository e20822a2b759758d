from exam_seating.errors import SeatingInputError, StudentImportError
from exam_seating.generator import generate_seating_plan, split_overflow
from exam_seating.models import Room, SeatingPlan, Student

__all__ = [
    "Room",
    "SeatingInputError",
    "SeatingPlan",
    "Student",
    "StudentImportError",
    "generate_seating_plan",
    "split_overflow",
]
