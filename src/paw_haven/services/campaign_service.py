import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from boto3.dynamodb.conditions import Attr

from paw_haven.core.exceptions import InvalidInputError
from paw_haven.data_access.dynamodb import DynamoDataAccess
from paw_haven.models.campaign import DonationCampaign

logger = logging.getLogger(__name__)

FEATURED_CAMPAIGNS = 4
LIMITED_CAMPAIGNS = 3

CENT = Decimal("0.01")


def parse_amount(value: Any, field: str = "amount") -> Decimal:
    """Validate a positive, finite amount and round it to whole cents."""
    if value is None or isinstance(value, bool):
        raise InvalidInputError(f"{field} is required and must be a number", field=field)
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise InvalidInputError(f"{field} must be a number", field=field)
    if not amount.is_finite():
        raise InvalidInputError(f"{field} must be greater than 0", field=field)
    try:
        amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidInputError(f"{field} is too large", field=field)
    if amount <= 0:
        raise InvalidInputError(f"{field} must be at least {CENT}", field=field)
    return amount


def format_amount(value: Decimal) -> str:
    if value == value.to_integral_value():
        return str(int(value))
    return str(value.normalize())


def headroom(campaign: dict) -> Decimal:
    return Decimal(str(campaign.get("maxDonation", 0))) - Decimal(str(campaign.get("currentDonation", 0)))


def check_capacity(campaign: dict, amount: Decimal) -> None:
    if campaign.get("isPaused"):
        raise InvalidInputError("This campaign is paused and does not accept donations")
    remaining = headroom(campaign)
    if amount > remaining:
        raise InvalidInputError(
            f"Donation exceeds the campaign limit. Remaining amount: {format_amount(remaining)}",
            field="amount",
        )


class CampaignService:
    def __init__(self, data_access: DynamoDataAccess):
        self.campaigns = data_access.campaigns

    def create(self, campaign: dict, owner_email: str) -> dict:
        max_donation = parse_amount(campaign.get("maxDonation"), field="maxDonation")
        doc = DonationCampaign(**{
            **campaign,
            "maxDonation": float(max_donation),
            "addedBy": owner_email,
            "currentDonation": 0,
            "donors": 0,
            "isPaused": False,
        })
        return self.campaigns.create(doc.model_dump())

    def all_campaigns(self) -> list[dict]:
        return self.campaigns.find()

    def by_owner(self, email: str) -> list[dict]:
        return self.campaigns.find({"addedBy": email})

    def featured(self) -> list[dict]:
        return self.campaigns.find({"isPaused": False}, limit=FEATURED_CAMPAIGNS)

    def limited(self, exclude: str | None = None) -> list[dict]:
        return self.campaigns.find(
            {"isPaused": False},
            exclude={"id": exclude} if exclude else None,
            limit=LIMITED_CAMPAIGNS,
        )

    def paged(self, page: int, limit: int) -> dict:
        return self.campaigns.list_page(page=page, limit=limit)

    def get(self, campaign_id: str) -> dict:
        return self.campaigns.get(campaign_id)

    def update(self, campaign_id: str, patch: dict, owner_email: str, upsert: bool = False) -> dict:
        # the ledger fields only move through donations and refunds
        patch = {k: v for k, v in patch.items() if k not in {"currentDonation", "donors"}}
        if "maxDonation" in patch:
            patch["maxDonation"] = parse_amount(patch["maxDonation"], field="maxDonation")
        if "isPaused" in patch and not isinstance(patch["isPaused"], bool):
            raise InvalidInputError("isPaused must be true or false", field="isPaused")

        insert = {
            "addedBy": owner_email,
            "currentDonation": 0,
            "donors": 0,
            "isPaused": patch.get("isPaused", False),
        }
        return self.campaigns.update(campaign_id, patch, upsert=upsert, insert=insert)

    def toggle_pause(self, campaign_id: str) -> dict:
        return self.campaigns.toggle(campaign_id, "isPaused")

    def delete(self, campaign_id: str) -> dict:
        return self.campaigns.delete(campaign_id)

    def add_donation(self, campaign_id: str, value: Any) -> dict:
        amount = parse_amount(value)
        campaign = self.campaigns.get(campaign_id)
        check_capacity(campaign, amount)

        max_donation = Decimal(str(campaign["maxDonation"]))
        updated = self.campaigns.add(
            campaign_id,
            {"currentDonation": amount, "donors": 1},
            condition=(
                Attr("isPaused").eq(False)
                & Attr("maxDonation").eq(max_donation)
                & Attr("currentDonation").lte(max_donation - amount)
            ),
        )
        if updated is None:
            # headroom shrank since the read
            check_capacity(self.campaigns.get(campaign_id), amount)
            raise InvalidInputError("The campaign changed while donating, try again")
        return updated

    def refund(self, campaign_id: str, value: Any) -> dict:
        amount = parse_amount(value)
        updated = self.campaigns.add(
            campaign_id,
            {"currentDonation": -amount, "donors": -1},
            condition=Attr("currentDonation").gte(amount) & Attr("donors").gt(0),
        )
        if updated is None:
            self.campaigns.get(campaign_id)
            raise InvalidInputError("Refund exceeds the amount collected by this campaign", field="amount")
        logger.info("Refund applied", extra={"campaign_id": campaign_id, "amount": format_amount(amount)})
        return updated
