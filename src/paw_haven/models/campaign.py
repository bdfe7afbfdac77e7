from pydantic import BaseModel, ConfigDict, Field


class DonationCampaign(BaseModel):
    model_config = ConfigDict(extra="allow")

    addedBy: str
    maxDonation: float = Field(gt=0)
    currentDonation: float = 0
    donors: int = 0
    isPaused: bool = False
    lastDate: str | None = None
