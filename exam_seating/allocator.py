import logging
from collections import namedtuple

from exam_seating.models import RoomSeating, Seat


logger = logging.getLogger(__name__)


Pick = namedtuple("Pick", ["student", "is_reference"])


class SeatSelector:
    """Chooses the next student for a seat across the shared pools.

    Holds the per-room year lock. Pools are mutated as students are taken and
    are shared by every room of one run.
    """

    def __init__(self, pools, lookahead=5):
        self.pools = pools
        self.lookahead = lookahead
        self.years = sorted({year for year, _ in pools})
        self.room_year_lock = {}

    def candidate_pools(self, room_idx, last_was_reference):
        """Pools to try, in order, for the next seat of ``room_idx``."""
        locked_year = self.room_year_lock.get(room_idx)
        years = self.years if locked_year is None else [locked_year]

        # alternate: after a reference-cohort seat prefer the other cohort
        preferred = not last_was_reference
        candidates = []
        for year in years:
            for is_reference in (preferred, not preferred):
                pool = self.pools.get((year, is_reference))
                if pool is not None:
                    candidates.append(pool)
        return candidates

    def next_student(self, room_idx, last_was_reference, left_branch=None):
        for pool in self.candidate_pools(room_idx, last_was_reference):
            student = pool.take(left_branch, self.lookahead)
            if student is not None:
                self.room_year_lock.setdefault(room_idx, student.year)
                return Pick(student, pool.is_reference)
        return None

    def leftover(self):
        return [student for pool in self.pools.values() for student in pool.leftover()]


def fill_room(plan, room_idx, selector):
    rows, cols = plan.rows, plan.cols
    grid = [[None] * cols for _ in range(rows)]
    to_fill = set(plan.seat_positions)

    last_was_reference = False
    placed = 0
    for position in range(rows * cols):
        if position not in to_fill:
            continue
        row, col = divmod(position, cols)

        left = grid[row][col - 1] if col > 0 else None
        pick = selector.next_student(room_idx, last_was_reference, left.branch if left else None)
        if pick is None:
            logger.debug(
                "Room %s ran out of year %s students after %d of %d seats",
                plan.room.name,
                selector.room_year_lock.get(room_idx),
                placed,
                plan.occupancy,
            )
            break

        grid[row][col] = Seat.from_student(pick.student)
        last_was_reference = pick.is_reference
        placed += 1

    logger.debug(
        "Room %s: %d/%d seats filled, year %s",
        plan.room.name,
        placed,
        rows * cols,
        selector.room_year_lock.get(room_idx),
    )
    return grid


def allocate_rooms(plans, pools, lookahead=5):
    """Fill every planned room in order; returns (room seatings, leftover students)."""
    selector = SeatSelector(pools, lookahead=lookahead)

    seatings = []
    for room_idx, plan in enumerate(plans):
        grid = fill_room(plan, room_idx, selector)
        seatings.append(RoomSeating(room_id=plan.room.room_id, room_name=plan.room.name, grid=grid))

    return seatings, selector.leftover()
