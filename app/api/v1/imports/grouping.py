"""
Fold grade + curriculum rows into one write per grade.

A file usually lists a grade once per subject:

    Grade,Level,Subject,Hours/Week
    7th,7,Math,5
    7th,7,Physics,3

Both rows become a single GradeGroup with two curriculum entries.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from .matching import normalize_name
from .report import ValidatedRow


@dataclass
class GradeGroup:
    grade_name: str
    level: int
    matched_id: Optional[UUID] = None
    subject_hours: Dict[UUID, int] = field(default_factory=dict)  # insertion ordered
    rows: List[ValidatedRow] = field(default_factory=list)


def group_grade_rows(rows: Sequence[ValidatedRow]) -> Dict[str, GradeGroup]:
    """Group valid rows by normalized grade name, preserving first-seen order.

    The first row of a grade fixes its name and level; a subject repeated for
    the same grade keeps the hours of its last row.
    """
    groups: Dict[str, GradeGroup] = {}
    for row in rows:
        if not row.is_valid:
            continue
        key = normalize_name(row.data["grade"])
        group = groups.get(key)
        if group is None:
            group = GradeGroup(
                grade_name=row.data["grade"],
                level=row.values["level"],
                matched_id=row.matched_id,
            )
            groups[key] = group
        subject_id = row.values.get("subject_id")
        if subject_id is not None:
            group.subject_hours[subject_id] = row.values["hours_per_week"]
        group.rows.append(row)
    return groups
