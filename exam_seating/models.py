class Student:
    def __init__(self, stu_id, name, branch, year, section, register_number):
        self.stu_id = stu_id
        self.name = name
        self.branch = branch
        self.year = int(year)
        self.section = section
        self.register_number = register_number

    def __repr__(self):
        return f"Student({self.register_number!r}, {self.branch}, year={self.year})"


class Room:
    def __init__(self, room_id, name, capacity, rows=None, cols=None):
        self.room_id = room_id
        self.name = name
        self.capacity = int(capacity)
        self.rows = rows
        self.cols = cols

    def __repr__(self):
        return f"Room({self.name!r}, capacity={self.capacity})"


class Seat:
    """Snapshot of a student taken at placement time."""

    def __init__(self, student_id, register_number, name, branch, section, year):
        self.student_id = student_id
        self.register_number = register_number
        self.name = name
        self.branch = branch
        self.section = section
        self.year = year

    @classmethod
    def from_student(cls, student):
        return cls(
            student_id=student.stu_id,
            register_number=student.register_number,
            name=student.name,
            branch=student.branch,
            section=student.section,
            year=student.year,
        )

    def to_dict(self):
        return {
            "student_id": self.student_id,
            "register_number": self.register_number,
            "name": self.name,
            "branch": self.branch,
            "section": self.section,
            "year": self.year,
        }


class RoomSeating:
    def __init__(self, room_id, room_name, grid):
        self.room_id = room_id
        self.room_name = room_name
        self.grid = grid

    def seats(self):
        """Placed seats in row-major order, gaps skipped."""
        return [seat for row in self.grid for seat in row if seat is not None]

    def to_dict(self):
        return {
            "room_id": self.room_id,
            "room_name": self.room_name,
            "layout": [
                [seat.to_dict() if seat is not None else None for seat in row]
                for row in self.grid
            ],
        }


class SeatingPlan:
    def __init__(self, rooms, unassigned_student_ids, stranded_student_ids=None):
        self.rooms = rooms
        self.unassigned_student_ids = unassigned_student_ids
        # left in a pool after every room was filled (year lock starvation)
        self.stranded_student_ids = stranded_student_ids or []

    @property
    def placed_count(self):
        return sum(len(room.seats()) for room in self.rooms)

    def to_dict(self):
        return {
            "rooms": [room.to_dict() for room in self.rooms],
            "unassigned_count": len(self.unassigned_student_ids),
            "unassigned_student_ids": list(self.unassigned_student_ids),
            "stranded_student_ids": list(self.stranded_student_ids),
        }
