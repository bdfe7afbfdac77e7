import logging
from decimal import Decimal
from typing import Any

from paw_haven.core.exceptions import InvalidInputError
from paw_haven.data_access.dynamodb import DynamoDataAccess
from paw_haven.models.donation import Donation
from paw_haven.services.campaign_service import check_capacity, format_amount, parse_amount

logger = logging.getLogger(__name__)

class DonationService:
    def __init__(self, data_access: DynamoDataAccess):
        self.data_access = data_access
        self.donations = data_access.donations
        self.campaigns = data_access.campaigns

    def donate(self, donation: dict, donor_email: str) -> dict:
        amount = parse_amount(donation.get("donatedAmount"), field="donatedAmount")
        campaign_id = donation.get("campaignId")
        if not campaign_id:
            raise InvalidInputError("campaignId is required", field="campaignId")

        campaign = self.campaigns.get(campaign_id)
        check_capacity(campaign, amount)

        doc = Donation(**{**donation, "donorEmail": donor_email, "donatedAmount": float(amount)})
        max_donation = Decimal(str(campaign["maxDonation"]))
        donation_id = self.data_access.record_donation(
            doc.model_dump(),
            campaign_id=campaign_id,
            amount=amount,
            expected_max=max_donation,
            ceiling=max_donation - amount,
        )
        if donation_id is None:
            check_capacity(self.campaigns.get(campaign_id), amount)
            raise InvalidInputError("The campaign changed while donating, try again")

        logger.info(
            f"Recorded donation {donation_id}",
            extra={"email": donor_email, "campaign_id": campaign_id, "amount": format_amount(amount)},
        )
        return {"insertedId": donation_id}

    def for_campaign(self, campaign_id: str) -> list[dict]:
        return self.donations.find({"campaignId": campaign_id})

    def for_donor(self, email: str) -> list[dict]:
        return self.donations.find({"donorEmail": email})

    def get(self, donation_id: str) -> dict:
        return self.donations.get(donation_id)

    def delete(self, donation_id: str) -> dict:
        return self.donations.delete(donation_id)
