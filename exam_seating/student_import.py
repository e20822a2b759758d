import logging

import pandas as pd

from exam_seating.errors import StudentImportError
from exam_seating.models import Student


logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"register_number", "name", "branch", "section", "year"}


def read_roster(source):
    """Read a roster sheet into a DataFrame with normalised column names."""
    try:
        df = pd.read_excel(source)
    except Exception as e:
        raise StudentImportError(f"Excel read failed: {e}") from e

    df.columns = [str(c).strip().lower().replace(" ", "_") for c in df.columns]

    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise StudentImportError(f"Missing columns: {', '.join(sorted(missing))}")

    return df.dropna(subset=["register_number"])


def _clean_register_number(value):
    # numeric register numbers come back as floats when the column has blanks
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def student_import_excel(source):
    students = []
    df = read_roster(source)

    for line, row in df.iterrows():
        try:
            year = int(row["year"])
        except (TypeError, ValueError) as e:
            raise StudentImportError(f"Row {line + 2}: invalid year {row['year']!r}") from e

        register_number = _clean_register_number(row["register_number"])
        students.append(
            Student(
                stu_id=register_number,
                name=str(row["name"]).strip(),
                branch=str(row["branch"]).strip().upper(),
                year=year,
                section=str(row["section"]).strip().upper(),
                register_number=register_number,
            )
        )

    logger.info("Imported %d students", len(students))
    return students
