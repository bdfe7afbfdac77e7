from fastapi import APIRouter, Depends

from paw_haven.api.guards import get_current_user, owns_donation, owns_path_email
from paw_haven.api.schemas import (
    AdoptionRequestBody,
    DeleteResult,
    DonationRequest,
    InsertResult,
    PaymentIntentRequest,
    PaymentIntentResponse,
    SessionUser,
)
from paw_haven.core.dependencies import get_adoption_service, get_donation_service, get_payment_service
from paw_haven.services.adoption_service import AdoptionService
from paw_haven.services.donation_service import DonationService
from paw_haven.services.payment_service import PaymentService

router = APIRouter(tags=["donations"])

@router.post(
    "/create-payment-intent",
    response_model=PaymentIntentResponse,
    dependencies=[Depends(get_current_user)],
)
def create_payment_intent(
    body: PaymentIntentRequest,
    payments: PaymentService = Depends(get_payment_service),
):
    client_secret = payments.create_intent(body.campaignId, body.amount)
    return PaymentIntentResponse(clientSecret=client_secret)

@router.post("/donations", response_model=InsertResult)
def create_donation(
    body: DonationRequest,
    user: SessionUser = Depends(get_current_user),
    donations: DonationService = Depends(get_donation_service),
):
    return donations.donate(body.model_dump(), donor_email=user.email)

@router.get("/donationCampaign/{id}", dependencies=[Depends(get_current_user)])
def campaign_donations(id: str, donations: DonationService = Depends(get_donation_service)):
    return donations.for_campaign(id)

@router.get("/donations/{email}", dependencies=[Depends(owns_path_email)])
def my_donations(email: str, donations: DonationService = Depends(get_donation_service)):
    return donations.for_donor(email)

@router.delete("/delete-donation/{id}", response_model=DeleteResult, dependencies=[Depends(owns_donation)])
def delete_donation(id: str, donations: DonationService = Depends(get_donation_service)):
    return donations.delete(id)

@router.post("/adopted-pet", response_model=InsertResult)
def request_adoption(
    body: AdoptionRequestBody,
    user: SessionUser = Depends(get_current_user),
    adoptions: AdoptionService = Depends(get_adoption_service),
):
    return adoptions.request(body.model_dump(), requester_email=user.email)

@router.get("/adopted-pet/{email}", dependencies=[Depends(owns_path_email)])
def my_adoption_requests(email: str, adoptions: AdoptionService = Depends(get_adoption_service)):
    return adoptions.for_requester(email)
