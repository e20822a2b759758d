import argparse

from exam_seating.config import settings
from exam_seating.errors import SeatingInputError, StudentImportError
from exam_seating.generator import generate_seating_plan
from exam_seating.logging import setup_logging
from exam_seating.models import Room
from exam_seating.student_import import student_import_excel


DEFAULT_ROOMS = ["R1:60", "R2:60", "R3:45"]


def parse_room(arg):
    # "R1:60" -> Room R1 with 60 seats; capacity defaults to 60
    name, _, capacity = arg.partition(":")
    name = name.strip()
    try:
        seats = int(capacity or 60)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid capacity in {arg!r}, expected NAME:CAPACITY")
    if not name or seats < 1:
        raise argparse.ArgumentTypeError(f"invalid room {arg!r}, expected NAME:CAPACITY with a positive capacity")
    return Room(room_id=name, name=name, capacity=seats)


def build_parser():
    parser = argparse.ArgumentParser(description="Generate an exam seating plan from a roster sheet.")
    parser.add_argument("roster", nargs="?", default="students.xlsx")
    parser.add_argument(
        "--room", action="append", dest="rooms", type=parse_room, help="NAME:CAPACITY, repeatable"
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(environment=settings.environment)

    rooms = args.rooms or [parse_room(r) for r in DEFAULT_ROOMS]
    try:
        students = student_import_excel(args.roster)
        plan = generate_seating_plan(students, rooms)
    except (SeatingInputError, StudentImportError) as exc:
        parser.error(str(exc))

    print("\n--- Seat Allocation ---")
    for room in plan.rooms:
        print(f"\nRoom {room.room_name}")
        for row in room.grid:
            print(" | ".join(f"{s.register_number:>12} {s.branch:<5}" if s else " " * 18 for s in row))

    print(f"\nPlaced: {plan.placed_count}  Unassigned: {len(plan.unassigned_student_ids)}")


if __name__ == "__main__":
    main()
