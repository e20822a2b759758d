from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint

from exam_seating.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class StudentDB(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    register_number = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    branch = Column(String, nullable=False)
    section = Column(String, nullable=False)
    year = Column(Integer, nullable=False)


class ClassGroupDB(Base):
    __tablename__ = "class_groups"
    __table_args__ = (UniqueConstraint("branch", "section", "year", name="uq_class_group"),)

    id = Column(Integer, primary_key=True, index=True)
    branch = Column(String, nullable=False)
    section = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    display_name = Column(String, nullable=False)


class RoomDB(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    capacity = Column(Integer, nullable=False)
    rows = Column(Integer, nullable=True)
    cols = Column(Integer, nullable=True)


class SeatingDB(Base):
    __tablename__ = "seatings"

    id = Column(Integer, primary_key=True, index=True)
    exam_name = Column(String, nullable=False)
    exam_date = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    # JSON: [{"class_id", "branch", "section", "year", "display_name"}, ...]
    included_classes_json = Column(Text, nullable=False, default="[]")
    # JSON: [{"room_id", "room_name", "layout": [[seat | null, ...], ...]}, ...]
    rooms_json = Column(Text, nullable=False, default="[]")

    unassigned_count = Column(Integer, nullable=False, default=0)
    # JSON list of student ids
    unassigned_json = Column(Text, nullable=False, default="[]")
    stranded_json = Column(Text, nullable=False, default="[]")
