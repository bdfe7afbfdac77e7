from typing import Any
from pydantic import BaseModel, ConfigDict, Field

class SessionUser(BaseModel):
    """Identity claims carried by the session token."""
    model_config = ConfigDict(extra="allow")

    email: str

class SuccessResponse(BaseModel):
    success: bool

class UserProfileRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str | None = None

class RoleResponse(BaseModel):
    role: str
    isBanned: bool = False

class StatsResponse(BaseModel):
    users: int
    pets: int
    campaigns: int
    donations: int
    adoptionRequests: int
    totalDonated: float

class PetRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    category: str

class AdoptionStatusRequest(BaseModel):
    adopted: bool = True

class CategoryCount(BaseModel):
    category: str
    slug: str
    count: int

class CampaignRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    maxDonation: float = Field(gt=0)
    lastDate: str | None = None

class AmountRequest(BaseModel):
    # validated by the services so bad amounts share one error shape
    amount: Any = None

class PaymentIntentRequest(BaseModel):
    campaignId: str
    amount: Any = None

class PaymentIntentResponse(BaseModel):
    clientSecret: str

class DonationRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    campaignId: str | None = None
    donatedAmount: Any = None

class AdoptionRequestBody(BaseModel):
    model_config = ConfigDict(extra="allow")

    petId: str | None = None

class InsertResult(BaseModel):
    insertedId: str

class UpdateResult(BaseModel):
    matchedCount: int
    modifiedCount: int
    upsertedId: str | None = None

class DeleteResult(BaseModel):
    deletedCount: int

class Page(BaseModel):
    items: list[dict[str, Any]]
    page: int
    totalPages: int
    totalCount: int
    nextPage: int | None = None
