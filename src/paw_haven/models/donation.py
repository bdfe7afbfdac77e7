from pydantic import BaseModel, ConfigDict


class Donation(BaseModel):
    model_config = ConfigDict(extra="allow")

    campaignId: str
    donorEmail: str
    donatedAmount: float


class AdoptionRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    petId: str | None = None
    addedBy: str
