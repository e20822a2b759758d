import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.responses import FileResponse, JSONResponse
from sqlalchemy import func
from sqlalchemy.orm import Session

from exam_seating import providers
from exam_seating.config import settings
from exam_seating.database import Base, engine, get_db
from exam_seating.db_models import ClassGroupDB, RoomDB, StudentDB
from exam_seating.errors import SeatingInputError, StudentImportError
from exam_seating.export import export_seating_excel
from exam_seating.generator import generate_seating_plan
from exam_seating.layouts import grid_shape, sort_rooms
from exam_seating.logging import setup_logging
from exam_seating.models import Room
from exam_seating.schemas import (
    ClassGroupCreate,
    ClassGroupOut,
    GenerateSeatingRequest,
    GenerateSeatingResponse,
    RoomCreate,
    RoomOut,
    SeatingOut,
    SeatingSummary,
    StudentOut,
)
from exam_seating.student_import import student_import_excel


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app):
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    setup_logging(environment=settings.environment)
    app = FastAPI(title="Exam Seat Allocator API", lifespan=lifespan)

    @app.exception_handler(SeatingInputError)
    def _seating_input_error(_request, exc: SeatingInputError):
        logger.info("Seating request rejected: %s", exc)
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(StudentImportError)
    def _student_import_error(_request, exc: StudentImportError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    register_routes(app)
    return app


def register_routes(app):
    @app.get("/")
    def root():
        return {"message": "Seat Allocator API is running !"}

    @app.get("/students", response_model=list[StudentOut])
    def get_students(db: Session = Depends(get_db)):
        return db.query(StudentDB).order_by(StudentDB.register_number).all()

    @app.get("/students/{student_id}", response_model=StudentOut)
    def get_student(student_id: int, db: Session = Depends(get_db)):
        student = db.query(StudentDB).filter(StudentDB.id == student_id).first()
        if not student:
            raise HTTPException(status_code=404, detail="Student not found")
        return student

    @app.post("/students/import")
    def import_students_from_excel(file: UploadFile = File(...), db: Session = Depends(get_db)):
        students = student_import_excel(file.file)

        existing = {r for (r,) in db.query(StudentDB.register_number).all()}
        inserted = 0
        skipped = 0

        for s in students:
            if s.register_number in existing:
                skipped += 1
                continue
            db.add(
                StudentDB(
                    register_number=s.register_number,
                    name=s.name,
                    branch=s.branch,
                    section=s.section,
                    year=s.year,
                )
            )
            existing.add(s.register_number)
            inserted += 1

        db.commit()
        logger.info("Student import: %d inserted, %d duplicates skipped", inserted, skipped)

        return {
            "message": "Student import completed",
            "inserted": inserted,
            "skipped_duplicates": skipped,
        }

    @app.get("/classes", response_model=list[ClassGroupOut])
    def get_classes(db: Session = Depends(get_db)):
        counts = {
            (branch, section, year): n
            for branch, section, year, n in db.query(
                StudentDB.branch, StudentDB.section, StudentDB.year, func.count(StudentDB.id)
            )
            .group_by(StudentDB.branch, StudentDB.section, StudentDB.year)
            .all()
        }
        groups = db.query(ClassGroupDB).order_by(ClassGroupDB.branch, ClassGroupDB.section, ClassGroupDB.year).all()
        return [
            ClassGroupOut(
                id=g.id,
                branch=g.branch,
                section=g.section,
                year=g.year,
                display_name=g.display_name,
                student_count=counts.get((g.branch, g.section, g.year), 0),
            )
            for g in groups
        ]

    @app.get("/classes/{class_id}", response_model=ClassGroupOut)
    def get_class(class_id: int, db: Session = Depends(get_db)):
        group = db.query(ClassGroupDB).filter(ClassGroupDB.id == class_id).first()
        if not group:
            raise HTTPException(status_code=404, detail="Class group not found")

        count = (
            db.query(func.count(StudentDB.id))
            .filter(StudentDB.branch == group.branch, StudentDB.section == group.section, StudentDB.year == group.year)
            .scalar()
        )
        return ClassGroupOut(
            id=group.id,
            branch=group.branch,
            section=group.section,
            year=group.year,
            display_name=group.display_name,
            student_count=count,
        )

    @app.post("/classes", response_model=ClassGroupOut, status_code=201)
    def create_class(payload: ClassGroupCreate, db: Session = Depends(get_db)):
        branch = payload.branch.strip().upper()
        section = payload.section.strip().upper()

        existing = (
            db.query(ClassGroupDB)
            .filter(ClassGroupDB.branch == branch, ClassGroupDB.section == section, ClassGroupDB.year == payload.year)
            .first()
        )
        if existing:
            raise HTTPException(status_code=409, detail="Class group already exists")

        group = ClassGroupDB(
            branch=branch,
            section=section,
            year=payload.year,
            display_name=payload.display_name or f"{branch} {section} - Year {payload.year}",
        )
        db.add(group)
        db.commit()
        db.refresh(group)
        return ClassGroupOut(
            id=group.id,
            branch=group.branch,
            section=group.section,
            year=group.year,
            display_name=group.display_name,
        )

    @app.get("/rooms", response_model=list[RoomOut])
    def get_rooms(db: Session = Depends(get_db)):
        rooms = {r.id: r for r in db.query(RoomDB).all()}
        ordered = sort_rooms([providers.to_room(r) for r in rooms.values()])
        return [rooms[r.room_id] for r in ordered]

    @app.get("/rooms/{room_id}", response_model=RoomOut)
    def get_room(room_id: int, db: Session = Depends(get_db)):
        room = db.query(RoomDB).filter(RoomDB.id == room_id).first()
        if not room:
            raise HTTPException(status_code=404, detail="Room not found")
        return room

    @app.post("/rooms", response_model=RoomOut, status_code=201)
    def create_room(payload: RoomCreate, db: Session = Depends(get_db)):
        name = payload.name.strip()
        if db.query(RoomDB).filter(RoomDB.name == name).first():
            raise HTTPException(status_code=409, detail=f"Room {name} already exists")

        # rejects grids that do not hold exactly `capacity` seats
        rows, cols = grid_shape(Room(room_id=None, name=name, capacity=payload.capacity, rows=payload.rows, cols=payload.cols))

        room = RoomDB(name=name, capacity=payload.capacity, rows=rows, cols=cols)
        db.add(room)
        db.commit()
        db.refresh(room)
        return room

    @app.post("/seating/generate", response_model=GenerateSeatingResponse, status_code=201)
    def generate_seating(req: GenerateSeatingRequest, db: Session = Depends(get_db)):
        students = providers.load_students(db, req.class_ids)
        rooms = providers.load_rooms(db, req.room_ids)

        plan = generate_seating_plan(students, rooms)
        seating = providers.save_seating(
            db,
            exam_name=req.exam_name,
            exam_date=req.exam_date.isoformat(),
            plan=plan,
            classes=providers.included_classes(db, req.class_ids),
        )

        message = "Seating arrangement generated successfully"
        if seating.unassigned_count > 0:
            message += f". Warning: {seating.unassigned_count} students could not be assigned (insufficient seats)"

        return {"message": message, "data": providers.seating_to_dict(seating)}

    @app.get("/seating", response_model=list[SeatingSummary])
    def get_all_seatings(db: Session = Depends(get_db)):
        return [providers.seating_to_dict(s, include_rooms=False) for s in providers.list_seatings(db)]

    @app.get("/seating/latest", response_model=SeatingOut)
    def get_latest_seating(db: Session = Depends(get_db)):
        seating = providers.latest_seating(db)
        if not seating:
            raise HTTPException(status_code=404, detail="No seating arrangement found")
        return providers.seating_to_dict(seating)

    @app.get("/seating/{seating_id}", response_model=SeatingOut)
    def get_seating(seating_id: int, db: Session = Depends(get_db)):
        seating = providers.get_seating(db, seating_id)
        if not seating:
            raise HTTPException(status_code=404, detail="Seating arrangement not found")
        return providers.seating_to_dict(seating)

    @app.get("/seating/{seating_id}/export/excel")
    def export_seating(seating_id: int, db: Session = Depends(get_db)):
        seating = providers.get_seating(db, seating_id)
        if not seating:
            raise HTTPException(status_code=404, detail="Seating arrangement not found")

        export_dir = Path(settings.export_dir)
        export_dir.mkdir(parents=True, exist_ok=True)

        file_path = export_dir / f"seating_{seating_id}.xlsx"
        export_seating_excel(providers.seating_to_dict(seating), file_path)

        return FileResponse(
            path=str(file_path),
            filename=file_path.name,
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )


app = create_app()


def run():
    """Serve the API with uvicorn on the configured host and port."""
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
