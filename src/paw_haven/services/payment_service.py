import logging
from typing import Any

import stripe

from paw_haven.core.exceptions import UpstreamError
from paw_haven.data_access.dynamodb import DynamoDataAccess
from paw_haven.services.campaign_service import check_capacity, parse_amount

logger = logging.getLogger(__name__)

class PaymentService:
    def __init__(self, data_access: DynamoDataAccess, currency: str = "usd"):
        self.campaigns = data_access.campaigns
        self.currency = currency

    def create_intent(self, campaign_id: str, value: Any) -> str:
        amount = parse_amount(value)
        campaign = self.campaigns.get(campaign_id)
        check_capacity(campaign, amount)

        try:
            intent = stripe.PaymentIntent.create(
                amount=int((amount * 100).to_integral_value()),
                currency=self.currency,
                automatic_payment_methods={"enabled": True},
                metadata={"campaign_id": campaign_id},
            )
        except stripe.StripeError as e:
            logger.error(f"Error creating Stripe intent for campaign {campaign_id}: {e}")
            raise UpstreamError("Payment provider error", context={"campaign_id": campaign_id})
        return intent.client_secret
