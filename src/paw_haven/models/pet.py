from pydantic import BaseModel, ConfigDict


class Pet(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    category: str
    addedBy: str
    adopted: bool = False
