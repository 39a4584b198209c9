from pydantic import BaseModel
from typing import Optional

class ProfileOut(BaseModel):
    id: str
    email: str
    firstName: str = ""
    lastName: str = ""
    avatarUrl: Optional[str] = None
    recentBookingsCount: int = 0

class ProfileUpdate(BaseModel):
    firstName: str
    lastName: str
    avatarUrl: Optional[str] = None
