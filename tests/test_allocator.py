from exam_seating.allocator import SeatSelector, allocate_rooms, fill_room
from exam_seating.layouts import RoomPlan, plan_room_capacity
from exam_seating.models import Room
from exam_seating.pools import Pool

from conftest import make_students


def _pools(**groups):
    """Unshuffled pools, e.g. y1_ref=[...], y1_other=[...]."""
    pools = {}
    for name, students in groups.items():
        year, cohort = name.split("_")
        key = (int(year[1:]), cohort == "ref")
        pools[key] = Pool(key[0], key[1], students)
    return pools


def _row_plan(name, seats, occupancy=None):
    room = Room(room_id=name, name=name, capacity=seats, rows=1, cols=seats)
    occupancy = seats if occupancy is None else occupancy
    return RoomPlan(room, 1, seats, occupancy, list(range(occupancy)))


def test_candidate_pools_before_and_after_lock():
    pools = _pools(
        y1_ref=make_students([("CSE", 1, 2)]),
        y1_other=make_students([("ECE", 1, 2)], start=10),
        y2_ref=make_students([("CSE", 2, 2)], start=20),
        y2_other=make_students([("ECE", 2, 2)], start=30),
    )
    selector = SeatSelector(pools)

    keys = [p.key for p in selector.candidate_pools(0, last_was_reference=False)]
    assert keys == [(1, True), (1, False), (2, True), (2, False)]

    pick = selector.next_student(0, last_was_reference=False)
    assert pick.student.branch == "CSE" and pick.is_reference
    assert selector.room_year_lock == {0: 1}

    keys = [p.key for p in selector.candidate_pools(0, last_was_reference=True)]
    assert keys == [(1, False), (1, True)]


def test_first_placement_falls_through_to_second_year():
    pools = _pools(
        y1_ref=[],
        y1_other=[],
        y2_ref=[],
        y2_other=make_students([("ECE", 2, 1)]),
    )
    selector = SeatSelector(pools)

    pick = selector.next_student(3, last_was_reference=False)

    assert pick.student.year == 2
    assert not pick.is_reference
    assert selector.room_year_lock[3] == 2
    assert selector.next_student(3, last_was_reference=False) is None


def test_fill_room_alternates_reference_and_other():
    pools = _pools(
        y1_ref=make_students([("CSE", 1, 3)]),
        y1_other=make_students([("ECE", 1, 1), ("MECH", 1, 1), ("IT", 1, 1)], start=10),
    )
    selector = SeatSelector(pools)

    grid = fill_room(_row_plan("R1", 6), 0, selector)

    assert [seat.branch for seat in grid[0]] == ["CSE", "ECE", "CSE", "MECH", "CSE", "IT"]


def test_fill_room_runs_other_cohort_once_reference_is_exhausted():
    pools = _pools(
        y1_ref=make_students([("CSE", 1, 1)]),
        y1_other=make_students([("ECE", 1, 1), ("MECH", 1, 1), ("IT", 1, 1)], start=10),
    )

    grid = fill_room(_row_plan("R1", 4), 0, SeatSelector(pools))

    assert [seat.branch for seat in grid[0]] == ["CSE", "ECE", "MECH", "IT"]


def test_fill_room_avoids_left_neighbour_branch():
    other = make_students([("ECE", 1, 2), ("MECH", 1, 2)])
    pools = _pools(y1_ref=[], y1_other=other)

    grid = fill_room(_row_plan("R1", 4), 0, SeatSelector(pools))

    assert [seat.branch for seat in grid[0]] == ["ECE", "MECH", "ECE", "MECH"]
    # the lookahead reordered the queue
    assert [s.branch for s in pools[(1, False)].students] == ["ECE", "MECH", "ECE", "MECH"]
    assert pools[(1, False)].students[1] is other[2]


def test_fill_room_left_neighbour_resets_at_row_start():
    room = Room(room_id="R1", name="R1", capacity=4, rows=2, cols=2)
    plan = RoomPlan(room, 2, 2, 4, [0, 1, 2, 3])
    pools = _pools(y1_ref=[], y1_other=make_students([("ECE", 1, 1), ("MECH", 1, 1), ("MECH", 1, 1), ("ECE", 1, 1)]))

    grid = fill_room(plan, 0, SeatSelector(pools))

    # row 2 starts with MECH even though the last seat of row 1 was MECH
    assert [[s.branch for s in row] for row in grid] == [["ECE", "MECH"], ["MECH", "ECE"]]


def test_fill_room_leaves_planned_gaps_empty():
    room = Room(room_id="R1", name="R1", capacity=4, rows=1, cols=4)
    plan = RoomPlan(room, 1, 4, 2, [0, 2])
    pools = _pools(y1_ref=[], y1_other=make_students([("ECE", 1, 4)]))

    grid = fill_room(plan, 0, SeatSelector(pools))

    assert grid[0][1] is None and grid[0][3] is None
    assert grid[0][0].branch == "ECE" and grid[0][2].branch == "ECE"
    assert pools[(1, False)].remaining == 2


def test_fill_room_stops_when_locked_year_runs_dry():
    pools = _pools(
        y1_ref=[],
        y1_other=make_students([("ECE", 1, 2)]),
        y2_ref=[],
        y2_other=make_students([("ECE", 2, 5)], start=10),
    )
    selector = SeatSelector(pools)

    grid = fill_room(_row_plan("R1", 4), 0, selector)

    assert [seat.year if seat else None for seat in grid[0]] == [1, 1, None, None]
    assert pools[(2, False)].remaining == 5


def test_allocate_rooms_locks_each_room_to_one_year():
    students = make_students([("CSE", 1, 30), ("ECE", 1, 30), ("CSE", 2, 30), ("ECE", 2, 30)])
    by_key = {}
    for s in students:
        by_key.setdefault((s.year, s.branch == "CSE"), []).append(s)
    pools = {key: Pool(key[0], key[1], members) for key, members in sorted(by_key.items())}
    rooms = [Room(i, f"R{i}", 60) for i in (1, 2)]

    seatings, leftover = allocate_rooms(plan_room_capacity(120, rooms), pools)

    assert leftover == []
    assert [{s.year for s in room.seats()} for room in seatings] == [{1}, {2}]
    assert [len(room.seats()) for room in seatings] == [60, 60]
    assert [room.room_name for room in seatings] == ["R1", "R2"]
