import random

import pytest

from exam_seating.models import Room, Student


def make_students(groups, start=1):
    """groups: iterable of (branch, year, count)."""
    students = []
    n = start
    for branch, year, count in groups:
        for _ in range(count):
            students.append(
                Student(
                    stu_id=n,
                    name=f"Student {n}",
                    branch=branch,
                    year=year,
                    section="A" if n % 2 else "B",
                    register_number=f"REG{n:05d}",
                )
            )
            n += 1
    return students


def make_rooms(*capacities):
    return [Room(room_id=i + 1, name=f"R{i + 1}", capacity=c) for i, c in enumerate(capacities)]


def fill_order(room_seating):
    return room_seating.seats()


@pytest.fixture
def rng():
    return random.Random(1234)
