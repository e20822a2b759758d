import random

import pandas as pd

from exam_seating.export import export_seating_excel, seating_to_frames
from exam_seating.generator import generate_seating_plan
from exam_seating.models import Room

from conftest import make_students


def _plan_dict():
    students = make_students([("CSE", 1, 3), ("ECE", 1, 3), ("IT", 1, 4)])
    rooms = [Room(2, "R2", 4, rows=2, cols=2), Room(1, "R1", 6, rows=2, cols=3)]
    return generate_seating_plan(students, rooms, rng=random.Random(0)).to_dict()


def test_seating_to_frames_one_grid_per_room():
    frames = seating_to_frames(_plan_dict())

    assert list(frames) == ["R1", "R2"]
    assert frames["R1"].shape == (2, 3)
    assert frames["R2"].shape == (2, 2)
    assert list(frames["R1"].columns) == ["Seat 1", "Seat 2", "Seat 3"]
    assert frames["R1"].iloc[0, 0].startswith("REG")


def test_export_seating_excel_writes_room_and_unassigned_sheets(tmp_path):
    data = _plan_dict()
    data["unassigned_student_ids"] = [99]

    path = export_seating_excel(data, tmp_path / "seating.xlsx")

    sheets = pd.read_excel(path, sheet_name=None)
    assert set(sheets) == {"R1", "R2", "Unassigned"}
    assert sheets["Unassigned"]["student_id"].tolist() == [99]


def test_export_cleans_invalid_sheet_characters(tmp_path):
    students = make_students([("CSE", 1, 3)])
    plan = generate_seating_plan(students, [Room(1, "Lab 1/A", 4, rows=2, cols=2)], rng=random.Random(0))

    path = export_seating_excel(plan.to_dict(), tmp_path / "out.xlsx")

    sheets = pd.read_excel(path, sheet_name=None)
    assert list(sheets) == ["Lab 1_A"]


def test_export_keeps_rooms_whose_titles_collide(tmp_path):
    long_name = "Examination Hall Block " + "A" * 20
    students = make_students([("CSE", 1, 4), ("ECE", 1, 4)])
    rooms = [
        Room(1, long_name + " 1", 4, rows=2, cols=2),
        Room(2, long_name + " 2", 4, rows=2, cols=2),
    ]
    data = generate_seating_plan(students, rooms, rng=random.Random(0)).to_dict()

    frames = seating_to_frames(data)
    path = export_seating_excel(data, tmp_path / "out.xlsx")

    titles = list(frames)
    assert len(titles) == 2
    assert titles[0] == long_name[:31]
    assert titles[1] == long_name[:27] + " (2)"
    assert all(len(t) <= 31 for t in titles)
    assert list(pd.read_excel(path, sheet_name=None)) == titles


def test_export_room_named_like_reserved_sheet(tmp_path):
    data = _plan_dict()
    data["rooms"][0]["room_name"] = "unassigned"
    data["unassigned_student_ids"] = [7]

    sheets = pd.read_excel(export_seating_excel(data, tmp_path / "out.xlsx"), sheet_name=None)

    assert list(sheets) == ["unassigned (1)", "R2", "Unassigned"]


def test_export_writes_stranded_sheet(tmp_path):
    students = make_students([("CSE", 1, 2), ("ECE", 2, 3)])
    plan = generate_seating_plan(students, [Room(1, "R1", 6, rows=2, cols=3)], rng=random.Random(0))
    data = plan.to_dict()
    assert len(data["stranded_student_ids"]) == 3

    sheets = pd.read_excel(export_seating_excel(data, tmp_path / "out.xlsx"), sheet_name=None)

    assert sorted(sheets["Stranded"]["student_id"].tolist()) == [3, 4, 5]
    assert "Unassigned" not in sheets
