from datetime import date, datetime
from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import EventType, ImportType
from app.core.models import SchoolEvent

from ..columns import ColumnSpec
from ..matching import match_by_key, normalize_name
from ..report import ValidatedRow
from .base import DEFAULT_COLOR, Importer, get_for_update, load_school_entities

VALID_EVENT_TYPES = [t.value for t in EventType]

TRUTHY = {"true", "1", "yes", "oui"}

DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%Y/%m/%d")


def parse_date(value: str) -> Optional[date]:
    """ISO dates first, then day-first slashes; ISO datetimes are truncated to the date."""
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def event_key(event: SchoolEvent):
    return normalize_name(event.title), event.start_date.isoformat()


class EventImporter(Importer):
    """School calendar events, matched on (title, start date)."""

    import_type = ImportType.EVENTS
    columns = (
        ColumnSpec("title", "Title", ("title", "name", "nom", "event"), required=True),
        ColumnSpec("title_fr", "Title (French)", ("title (french)", "titre (français)", "french", "titlefr")),
        ColumnSpec("title_ar", "Title (Arabic)", ("title (arabic)", "titre (arabe)", "arabic", "titlear")),
        ColumnSpec("type", "Type", ("type", "event type"), choices=tuple(VALID_EVENT_TYPES)),
        ColumnSpec("start_date", "Start Date", ("start date", "start", "date", "début", "startdate"), required=True),
        ColumnSpec("end_date", "End Date", ("end date", "end", "fin", "enddate")),
        ColumnSpec("color", "Color", ("color", "couleur", "colorhex")),
        ColumnSpec("recurring", "Recurring", ("recurring", "isrecurring", "récurrent"), choices=("true", "false")),
        ColumnSpec("description", "Description", ("description", "note", "notes")),
    )

    async def load_snapshot(self, db: AsyncSession) -> None:
        self.events = await load_school_entities(db, SchoolEvent, self.context.school_id)

    def validate(self, row: Sequence[str], row_index: int) -> ValidatedRow:
        errors: List[str] = []

        title = self.cell(row, "title")
        if not title:
            errors.append("Title is required")

        event_type = self.cell(row, "type", EventType.OTHER.value).upper().replace(" ", "_")
        if event_type not in VALID_EVENT_TYPES:
            errors.append(f"Invalid type: {event_type}. Must be one of: {', '.join(VALID_EVENT_TYPES)}")

        start_str = self.cell(row, "start_date")
        end_str = self.cell(row, "end_date", start_str)

        start_date = parse_date(start_str) if start_str else None
        end_date = parse_date(end_str) if end_str else None
        if not start_str:
            errors.append("Start date is required")
        elif start_date is None:
            errors.append(f"Invalid start date: {start_str}")
        if end_str and end_date is None:
            errors.append(f"Invalid end date: {end_str}")
        if start_date and end_date and end_date < start_date:
            errors.append("End date must be after start date")

        is_recurring = self.cell(row, "recurring").lower() in TRUTHY

        match = None
        if title and start_date:
            match = match_by_key(self.events, (normalize_name(title), start_date.isoformat()), key=event_key)

        return self.finish_row(
            row_index,
            data={
                "title": title,
                "title_fr": self.cell(row, "title_fr"),
                "title_ar": self.cell(row, "title_ar"),
                "type": event_type,
                "start_date": start_date.isoformat() if start_date else start_str,
                "end_date": end_date.isoformat() if end_date else end_str,
                "color": self.cell(row, "color", DEFAULT_COLOR),
                "recurring": "true" if is_recurring else "false",
                "description": self.cell(row, "description"),
            },
            errors=errors,
            values={"start_date": start_date, "end_date": end_date, "is_recurring": is_recurring},
            match=match,
        )

    @staticmethod
    def _apply(event: SchoolEvent, row: ValidatedRow) -> None:
        event.title = row.data["title"]
        event.title_fr = row.data["title_fr"] or None
        event.title_ar = row.data["title_ar"] or None
        event.type = row.data["type"]
        event.start_date = row.values["start_date"]
        event.end_date = row.values["end_date"]
        event.color_hex = row.data["color"]
        event.is_recurring = row.values["is_recurring"]
        event.description = row.data["description"] or None

    async def create_row(self, db: AsyncSession, row: ValidatedRow) -> None:
        event = SchoolEvent(school_id=self.context.school_id, affects_classes="[]")
        self._apply(event, row)
        db.add(event)

    async def update_row(self, db: AsyncSession, row: ValidatedRow) -> None:
        self._apply(await get_for_update(db, SchoolEvent, row.matched_id), row)
