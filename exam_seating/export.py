import re

import pandas as pd


# Excel caps sheet titles at 31 characters and forbids these
_MAX_TITLE = 31
_INVALID_TITLE_CHARS = re.compile(r"[\\/?*\[\]:]")

_RESERVED_SHEETS = ("Unassigned", "Stranded")


def _seat_label(seat):
    if not seat:
        return ""
    return f"{seat['register_number']} ({seat['branch']}-{seat['section']} Y{seat['year']})"


def room_to_frame(room):
    layout = room["layout"]
    cols = len(layout[0]) if layout else 0
    return pd.DataFrame(
        [[_seat_label(seat) for seat in row] for row in layout],
        index=[f"Row {r + 1}" for r in range(len(layout))],
        columns=[f"Seat {c + 1}" for c in range(cols)],
    )


def sheet_title(name, position, used):
    """A valid sheet title for ``name`` not yet in ``used`` (compared case-insensitively)."""
    title = _INVALID_TITLE_CHARS.sub("_", str(name or "")).strip().strip("'")[:_MAX_TITLE]
    if not title:
        title = f"Room {position}"

    candidate = title
    n = position
    while candidate.lower() in used:
        suffix = f" ({n})"
        candidate = title[: _MAX_TITLE - len(suffix)] + suffix
        n += 1

    used.add(candidate.lower())
    return candidate


def seating_to_frames(seating):
    """One grid DataFrame per room, keyed by sheet title, in seating order."""
    used = {name.lower() for name in _RESERVED_SHEETS}
    return {
        sheet_title(room["room_name"], position, used): room_to_frame(room)
        for position, room in enumerate(seating["rooms"], start=1)
    }


def export_seating_excel(seating, target):
    with pd.ExcelWriter(target, engine="openpyxl") as writer:
        for title, df in seating_to_frames(seating).items():
            df.to_excel(writer, sheet_name=title)

        unassigned = seating.get("unassigned_student_ids") or []
        if unassigned:
            pd.DataFrame({"student_id": unassigned}).to_excel(writer, sheet_name="Unassigned", index=False)

        stranded = seating.get("stranded_student_ids") or []
        if stranded:
            pd.DataFrame({"student_id": stranded}).to_excel(writer, sheet_name="Stranded", index=False)
    return target
