import json

from sqlalchemy import and_, or_

from exam_seating.db_models import ClassGroupDB, RoomDB, SeatingDB, StudentDB
from exam_seating.models import Room, Student


def to_student(row):
    return Student(
        stu_id=row.id,
        name=row.name,
        branch=row.branch,
        year=row.year,
        section=row.section,
        register_number=row.register_number,
    )


def to_room(row):
    return Room(room_id=row.id, name=row.name, capacity=row.capacity, rows=row.rows, cols=row.cols)


def selected_class_groups(db, class_ids):
    if not class_ids:
        return []
    return db.query(ClassGroupDB).filter(ClassGroupDB.id.in_(class_ids)).order_by(ClassGroupDB.id).all()


def load_students(db, class_ids=None):
    """Students in the selected class groups, or everyone when none are selected."""
    query = db.query(StudentDB)

    if class_ids:
        groups = selected_class_groups(db, class_ids)
        if not groups:
            return []
        query = query.filter(
            or_(
                *[
                    and_(
                        StudentDB.branch == g.branch,
                        StudentDB.section == g.section,
                        StudentDB.year == g.year,
                    )
                    for g in groups
                ]
            )
        )

    return [to_student(s) for s in query.order_by(StudentDB.register_number).all()]


def load_rooms(db, room_ids=None):
    query = db.query(RoomDB)
    if room_ids:
        query = query.filter(RoomDB.id.in_(room_ids))
    return [to_room(r) for r in query.all()]


def included_classes(db, class_ids):
    return [
        {
            "class_id": g.id,
            "branch": g.branch,
            "section": g.section,
            "year": g.year,
            "display_name": g.display_name,
        }
        for g in selected_class_groups(db, class_ids)
    ]


def save_seating(db, exam_name, exam_date, plan, classes):
    data = plan.to_dict()
    seating = SeatingDB(
        exam_name=exam_name,
        exam_date=str(exam_date),
        included_classes_json=json.dumps(classes),
        rooms_json=json.dumps(data["rooms"]),
        unassigned_count=data["unassigned_count"],
        unassigned_json=json.dumps(data["unassigned_student_ids"]),
        stranded_json=json.dumps(data["stranded_student_ids"]),
    )
    db.add(seating)
    db.commit()
    db.refresh(seating)
    return seating


def seating_to_dict(seating, include_rooms=True):
    data = {
        "id": seating.id,
        "exam_name": seating.exam_name,
        "exam_date": seating.exam_date,
        "created_at": seating.created_at,
        "included_classes": json.loads(seating.included_classes_json),
        "unassigned_count": seating.unassigned_count,
    }
    if include_rooms:
        data["rooms"] = json.loads(seating.rooms_json)
        data["unassigned_student_ids"] = json.loads(seating.unassigned_json)
        data["stranded_student_ids"] = json.loads(seating.stranded_json)
    return data


def get_seating(db, seating_id):
    return db.query(SeatingDB).filter(SeatingDB.id == seating_id).first()


def latest_seating(db):
    return db.query(SeatingDB).order_by(SeatingDB.created_at.desc(), SeatingDB.id.desc()).first()


def list_seatings(db):
    return db.query(SeatingDB).order_by(SeatingDB.created_at.desc(), SeatingDB.id.desc()).all()
