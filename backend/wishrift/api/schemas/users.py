from datetime import datetime
from typing import Optional

from wishrift.api.schemas.base import CamelModel


class UserOut(CamelModel):
    id: str
    username: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: datetime
