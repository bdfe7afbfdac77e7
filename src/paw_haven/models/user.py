from typing import Literal
from pydantic import BaseModel, ConfigDict, EmailStr


Role = Literal["user", "admin"]

class UserProfile(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: EmailStr
    name: str | None = None
    role: Role = "user"
    isBanned: bool = False
