import math
import re

from exam_seating.config import settings
from exam_seating.errors import SeatingInputError


_ROOM_NUMBER = re.compile(r"\d+")


def room_sort_key(room):
    # "R10" sorts after "R9"; names without digits go last, by name
    match = _ROOM_NUMBER.search(room.name or "")
    if match is None:
        return (1, 0, room.name or "")
    return (0, int(match.group()), room.name)


def sort_rooms(rooms):
    return sorted(rooms, key=room_sort_key)


def grid_shape(room, known_shapes=None):
    """Return (rows, cols) for a room.

    Explicit rows/cols win. Otherwise the standard hall shapes are looked up by
    capacity, and anything else gets the most square grid that holds exactly
    ``capacity`` seats.
    """
    if room.capacity <= 0:
        raise SeatingInputError(f"Room {room.name} has no seats (capacity {room.capacity})")

    if room.rows or room.cols:
        if not room.rows or not room.cols:
            raise SeatingInputError(f"Room {room.name} declares only one grid dimension")
        rows, cols = int(room.rows), int(room.cols)
        if rows * cols != room.capacity:
            raise SeatingInputError(
                f"Room {room.name} capacity {room.capacity} does not match its {rows}x{cols} grid"
            )
        return rows, cols

    shapes = settings.known_room_shapes if known_shapes is None else known_shapes
    if room.capacity in shapes:
        return tuple(shapes[room.capacity])

    cols = math.isqrt(room.capacity)
    if cols * cols < room.capacity:
        cols += 1
    while room.capacity % cols:
        cols += 1
    return room.capacity // cols, cols


def distribute_students_across_rooms(total_students, rooms):
    """Spread students as evenly as possible, earliest rooms taking the remainder.

    A room never gets more than its capacity; whatever a full room could not
    take is spread again over the rooms that still have space.
    """
    counts = [0] * len(rooms)
    remaining = total_students
    open_rooms = list(range(len(rooms)))

    while remaining > 0 and open_rooms:
        base, extra = divmod(remaining, len(open_rooms))
        still_open = []
        for position, idx in enumerate(open_rooms):
            share = base + (1 if position < extra else 0)
            placed = min(share, rooms[idx].capacity - counts[idx])
            counts[idx] += placed
            remaining -= placed
            if counts[idx] < rooms[idx].capacity:
                still_open.append(idx)
        open_rooms = still_open

    return counts


def calculate_seat_positions(total_seats, students_count):
    """Row-major seat indices to fill so that empty seats are spread out.

    Seat ``floor(i * total_seats / students_count)`` is used for every
    ``i < students_count``; a full room fills every seat.
    """
    if students_count >= total_seats:
        return list(range(total_seats))
    if students_count <= 0:
        return []
    return [(i * total_seats) // students_count for i in range(students_count)]


class RoomPlan:
    def __init__(self, room, rows, cols, occupancy, seat_positions):
        self.room = room
        self.rows = rows
        self.cols = cols
        self.occupancy = occupancy
        self.seat_positions = seat_positions

    @property
    def gaps(self):
        return self.rows * self.cols - len(self.seat_positions)


def plan_room_capacity(total_students, rooms):
    """Occupancy and seat positions per room, in the order the rooms are given."""
    shapes = [grid_shape(room) for room in rooms]
    occupancy = distribute_students_across_rooms(total_students, rooms)

    plans = []
    for room, (rows, cols), count in zip(rooms, shapes, occupancy):
        plans.append(
            RoomPlan(
                room=room,
                rows=rows,
                cols=cols,
                occupancy=count,
                seat_positions=calculate_seat_positions(rows * cols, count),
            )
        )
    return plans
