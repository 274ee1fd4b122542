from typing import List, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import ImportType, RoomType
from app.core.models import Room

from ..columns import ColumnSpec
from ..matching import match_by_key, normalize_name
from ..report import ValidatedRow
from .base import Importer, get_for_update, load_school_entities, parse_bounded_int

VALID_ROOM_TYPES = [t.value for t in RoomType]

DEFAULT_CAPACITY = 30


def normalize_room_type(value: str) -> str:
    """'Science Lab' -> 'SCIENCE_LAB'."""
    return value.strip().upper().replace(" ", "_")


class RoomImporter(Importer):
    import_type = ImportType.ROOMS
    columns = (
        ColumnSpec("name", "Name", ("name", "room", "salle", "nom"), required=True),
        ColumnSpec("building", "Building", ("building", "bâtiment", "batiment", "block")),
        ColumnSpec("capacity", "Capacity", ("capacity", "capacité", "seats", "places")),
        ColumnSpec("type", "Type", ("type", "room type"), choices=tuple(VALID_ROOM_TYPES)),
    )

    async def load_snapshot(self, db: AsyncSession) -> None:
        self.rooms = await load_school_entities(db, Room, self.context.school_id)

    def validate(self, row: Sequence[str], row_index: int) -> ValidatedRow:
        errors: List[str] = []

        name = self.cell(row, "name")
        if not name:
            errors.append("Name is required")

        capacity_str = self.cell(row, "capacity", str(DEFAULT_CAPACITY))
        capacity = parse_bounded_int(capacity_str, errors, "Capacity must be a positive number")

        room_type = normalize_room_type(self.cell(row, "type", RoomType.CLASSROOM.value))
        if room_type not in VALID_ROOM_TYPES:
            errors.append(f"Invalid type: {room_type}. Must be one of: {', '.join(VALID_ROOM_TYPES)}")

        match = match_by_key(self.rooms, normalize_name(name)) if name else None

        return self.finish_row(
            row_index,
            data={
                "name": name,
                "building": self.cell(row, "building"),
                "capacity": capacity_str,
                "type": room_type,
            },
            errors=errors,
            values={"capacity": capacity},
            match=match,
        )

    @staticmethod
    def _apply(room: Room, row: ValidatedRow) -> None:
        room.name = row.data["name"]
        room.building = row.data["building"] or None
        room.capacity = row.values["capacity"]
        room.type = row.data["type"]

    async def create_row(self, db: AsyncSession, row: ValidatedRow) -> None:
        room = Room(school_id=self.context.school_id)
        self._apply(room, row)
        db.add(room)

    async def update_row(self, db: AsyncSession, row: ValidatedRow) -> None:
        self._apply(await get_for_update(db, Room, row.matched_id), row)
