import logging

from exam_seating.allocator import allocate_rooms
from exam_seating.config import settings
from exam_seating.errors import SeatingInputError
from exam_seating.layouts import grid_shape, plan_room_capacity, sort_rooms
from exam_seating.models import SeatingPlan
from exam_seating.pools import build_pools


logger = logging.getLogger(__name__)


def _student_order(student):
    return (str(student.register_number), str(student.stu_id))


def split_overflow(students, rooms):
    """Return (students to seat, students left over) for the given rooms.

    Students are taken in register-number order; whoever falls past the total
    capacity is left over. Never raises on overflow.
    """
    ordered = sorted(students, key=_student_order)
    total_capacity = sum(room.capacity for room in rooms)

    if len(ordered) <= total_capacity:
        return ordered, []
    return ordered[:total_capacity], ordered[total_capacity:]


def _validate(students, rooms):
    if not students:
        raise SeatingInputError("No students found for selected classes.")
    if not rooms:
        raise SeatingInputError("No rooms selected.")

    seen = set()
    for room in rooms:
        grid_shape(room)
        if room.room_id is None:
            continue
        if room.room_id in seen:
            raise SeatingInputError(f"Room {room.name} selected twice")
        seen.add(room.room_id)


def generate_seating_plan(students, rooms, *, reference_branch=None, rng=None, lookahead=None):
    """Seat ``students`` across ``rooms``.

    Rooms are handled in numeric name order. Each room holds one academic
    year, reference-branch seats alternate with the other branches and the
    left neighbour's branch is avoided where the pool allows it. Students that
    do not fit end up in ``unassigned_student_ids``.
    """
    _validate(students, rooms)

    reference_branch = (reference_branch or settings.reference_branch).strip().upper()
    if lookahead is None:
        lookahead = settings.lookahead_window
    if lookahead < 1:
        raise SeatingInputError(f"Lookahead window must be at least 1, got {lookahead}")

    rooms = sort_rooms(rooms)
    to_seat, overflow = split_overflow(students, rooms)
    if overflow:
        logger.warning(
            "%d students exceed the %d available seats and stay unassigned",
            len(overflow),
            sum(room.capacity for room in rooms),
        )

    pools = build_pools(to_seat, reference_branch=reference_branch, rng=rng)
    plans = plan_room_capacity(len(to_seat), rooms)
    seatings, stranded = allocate_rooms(plans, pools, lookahead=lookahead)

    if stranded:
        logger.warning("%d students could not be seated because of the room year lock", len(stranded))

    plan = SeatingPlan(
        rooms=seatings,
        unassigned_student_ids=[s.stu_id for s in overflow],
        stranded_student_ids=[s.stu_id for s in stranded],
    )
    logger.info(
        "Seated %d of %d students in %d rooms (reference branch %s)",
        plan.placed_count,
        len(students),
        len(rooms),
        reference_branch,
    )
    return plan
