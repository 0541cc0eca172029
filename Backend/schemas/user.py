from pydantic import BaseModel
from datetime import datetime


class UserUpdate(BaseModel):
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class UserOut(BaseModel):
    id: int
    username: str
    email: str | None
    first_name: str | None
    last_name: str | None
    is_active: bool
    created_at: datetime | None

    class Config:
        from_attributes = True
