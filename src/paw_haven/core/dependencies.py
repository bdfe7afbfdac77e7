import boto3
import stripe
from fastapi import Depends
from functools import lru_cache

from paw_haven.core.config import settings
from paw_haven.data_access.dynamodb import DynamoDataAccess
from paw_haven.services.adoption_service import AdoptionService
from paw_haven.services.campaign_service import CampaignService
from paw_haven.services.donation_service import DonationService
from paw_haven.services.payment_service import PaymentService
from paw_haven.services.pet_service import PetService
from paw_haven.services.stats_service import StatsService
from paw_haven.services.user_service import UserService


@lru_cache()
def get_boto_session() -> boto3.Session:
    return boto3.Session(
        region_name=settings.AWS_REGION,
        profile_name=settings.AWS_PROFILE
    )

@lru_cache()
def get_dynamo_table():
    session = get_boto_session()
    dynamo_resource = session.resource('dynamodb', endpoint_url=settings.DYNAMODB_ENDPOINT_URL)
    return dynamo_resource.Table(settings.DYNAMODB_TABLE_NAME)

def get_data_access(table=Depends(get_dynamo_table)) -> DynamoDataAccess:
    return DynamoDataAccess(table=table)

def get_user_service(data_access: DynamoDataAccess = Depends(get_data_access)) -> UserService:
    return UserService(data_access)

def get_pet_service(data_access: DynamoDataAccess = Depends(get_data_access)) -> PetService:
    return PetService(data_access)

def get_campaign_service(data_access: DynamoDataAccess = Depends(get_data_access)) -> CampaignService:
    return CampaignService(data_access)

def get_donation_service(data_access: DynamoDataAccess = Depends(get_data_access)) -> DonationService:
    return DonationService(data_access)

def get_adoption_service(data_access: DynamoDataAccess = Depends(get_data_access)) -> AdoptionService:
    return AdoptionService(data_access)

def get_stats_service(data_access: DynamoDataAccess = Depends(get_data_access)) -> StatsService:
    return StatsService(data_access)

def get_payment_service(data_access: DynamoDataAccess = Depends(get_data_access)) -> PaymentService:
    stripe.api_key = settings.STRIPE_SECRET_KEY
    return PaymentService(data_access, currency=settings.PAYMENT_CURRENCY)
