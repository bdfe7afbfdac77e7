from typing import Any

from fastapi import APIRouter, Body, Depends

from paw_haven.api.guards import get_current_user, owns_campaign, owns_path_email
from paw_haven.api.schemas import (
    AmountRequest,
    CampaignRequest,
    DeleteResult,
    InsertResult,
    Page,
    SessionUser,
    UpdateResult,
)
from paw_haven.core.dependencies import get_campaign_service
from paw_haven.services.campaign_service import CampaignService

router = APIRouter(tags=["campaigns"])

@router.post("/donation-campaigns", response_model=InsertResult)
def create_campaign(
    campaign: CampaignRequest,
    user: SessionUser = Depends(get_current_user),
    campaigns: CampaignService = Depends(get_campaign_service),
):
    return campaigns.create(campaign.model_dump(), owner_email=user.email)

@router.get("/all-campaigns")
def all_campaigns(campaigns: CampaignService = Depends(get_campaign_service)):
    return campaigns.all_campaigns()

@router.get("/all-campaigns/{email}", dependencies=[Depends(owns_path_email)])
def my_campaigns(email: str, campaigns: CampaignService = Depends(get_campaign_service)):
    return campaigns.by_owner(email)

@router.get("/featuredCampaigns")
def featured_campaigns(campaigns: CampaignService = Depends(get_campaign_service)):
    return campaigns.featured()

@router.get("/limited-campaigns")
def limited_campaigns(
    exclude: str | None = None,
    campaigns: CampaignService = Depends(get_campaign_service),
):
    return campaigns.limited(exclude=exclude)

@router.get("/allCampaigns", response_model=Page)
def paged_campaigns(
    page: int = 1,
    limit: int = 6,
    campaigns: CampaignService = Depends(get_campaign_service),
):
    return campaigns.paged(page, limit)

@router.get("/donation-campaigns/{id}")
def get_campaign(id: str, campaigns: CampaignService = Depends(get_campaign_service)):
    return campaigns.get(id)

@router.put(
    "/update-campaign/{id}",
    response_model=UpdateResult,
    response_model_exclude_none=True,
    dependencies=[Depends(owns_campaign)],
)
def update_campaign(
    id: str,
    patch: dict[str, Any] = Body(...),
    upsert: bool = False,
    user: SessionUser = Depends(get_current_user),
    campaigns: CampaignService = Depends(get_campaign_service),
):
    return campaigns.update(id, patch, owner_email=user.email, upsert=upsert)

@router.patch("/donation-campaigns/{id}", dependencies=[Depends(owns_campaign)])
def toggle_pause(id: str, campaigns: CampaignService = Depends(get_campaign_service)):
    return campaigns.toggle_pause(id)

@router.patch("/donated-camp/{id}", dependencies=[Depends(get_current_user)])
def add_donation(
    id: str,
    body: AmountRequest,
    campaigns: CampaignService = Depends(get_campaign_service),
):
    return campaigns.add_donation(id, body.amount)

@router.patch("/refundMoney/{id}", dependencies=[Depends(get_current_user)])
def refund(
    id: str,
    body: AmountRequest,
    campaigns: CampaignService = Depends(get_campaign_service),
):
    return campaigns.refund(id, body.amount)

@router.delete("/donation-campaign/{id}", response_model=DeleteResult, dependencies=[Depends(owns_campaign)])
def delete_campaign(id: str, campaigns: CampaignService = Depends(get_campaign_service)):
    return campaigns.delete(id)
