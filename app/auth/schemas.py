from typing import Dict
from uuid import UUID

from pydantic import BaseModel


class CurrentUser(BaseModel):
    """Lightweight representation of the authenticated user for RBAC checks.
    school_id is the school the token was issued for; imports may only target that school.
    """

    id: UUID
    school_id: UUID
    role: str
    permissions: Dict[str, Dict[str, bool]]
