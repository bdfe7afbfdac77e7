from unittest.mock import patch

import pytest

from paw_haven.core.exceptions import InvalidInputError, NotFoundError
from paw_haven.services.campaign_service import CampaignService
from paw_haven.services.donation_service import DonationService

from conftest import ALICE, BOB


class TestDonate:

    def test_donation_is_recorded_and_credited_together(self, data_access, campaign):
        service = DonationService(data_access)

        inserted = service.donate({"campaignId": campaign, "donatedAmount": 10, "petName": "Rex"}, BOB)

        donation = data_access.donations.get(inserted["insertedId"])
        assert donation["donorEmail"] == BOB
        assert donation["donatedAmount"] == 10
        updated = data_access.campaigns.get(campaign)
        assert updated["currentDonation"] == 100
        assert updated["donors"] == 4

    def test_donation_over_headroom_changes_nothing(self, data_access, campaign):
        service = DonationService(data_access)

        with pytest.raises(InvalidInputError) as exc:
            service.donate({"campaignId": campaign, "donatedAmount": 11}, BOB)

        assert "Remaining amount: 10" in exc.value.message
        assert data_access.donations.count() == 0
        assert data_access.campaigns.get(campaign)["currentDonation"] == 90

    def test_donation_requires_a_campaign(self, data_access):
        with pytest.raises(InvalidInputError):
            DonationService(data_access).donate({"donatedAmount": 5}, BOB)

    def test_donation_to_missing_campaign(self, data_access):
        with pytest.raises(NotFoundError):
            DonationService(data_access).donate({"campaignId": "missing", "donatedAmount": 5}, BOB)

    def test_deleting_a_donation_keeps_the_campaign_total(self, data_access, campaign):
        service = DonationService(data_access)
        inserted = service.donate({"campaignId": campaign, "donatedAmount": 5}, BOB)

        assert service.delete(inserted["insertedId"]) == {"deletedCount": 1}
        assert data_access.campaigns.get(campaign)["currentDonation"] == 95

    def test_lists_by_campaign_and_donor(self, data_access, campaign):
        service = DonationService(data_access)
        service.donate({"campaignId": campaign, "donatedAmount": 2}, BOB)
        service.donate({"campaignId": campaign, "donatedAmount": 3}, ALICE)

        assert len(service.for_campaign(campaign)) == 2
        assert [d["donatedAmount"] for d in service.for_donor(BOB)] == [2]


class TestCampaignLedger:

    def test_create_forces_ledger_defaults(self, data_access):
        service = CampaignService(data_access)

        inserted = service.create({"maxDonation": 50, "currentDonation": 49, "donors": 9}, ALICE)

        created = service.get(inserted["insertedId"])
        assert (created["currentDonation"], created["donors"], created["isPaused"]) == (0, 0, False)
        assert created["addedBy"] == ALICE

    def test_guarded_increment(self, data_access, campaign):
        service = CampaignService(data_access)

        assert service.add_donation(campaign, 10)["currentDonation"] == 100
        with pytest.raises(InvalidInputError) as exc:
            service.add_donation(campaign, 1)
        assert "Remaining amount: 0" in exc.value.message

    def test_refund_reverses_a_donation(self, data_access, campaign):
        service = CampaignService(data_access)

        refunded = service.refund(campaign, 40)

        assert refunded["currentDonation"] == 50
        assert refunded["donors"] == 2

    def test_refund_cannot_go_below_zero(self, data_access, campaign):
        with pytest.raises(InvalidInputError):
            CampaignService(data_access).refund(campaign, 91)
        assert data_access.campaigns.get(campaign)["currentDonation"] == 90

    def test_update_cannot_touch_the_ledger(self, data_access, campaign):
        service = CampaignService(data_access)

        service.update(campaign, {"currentDonation": 0, "petName": "Max"}, ALICE)

        updated = service.get(campaign)
        assert (updated["currentDonation"], updated["petName"]) == (90, "Max")

    def test_limited_excludes_paused_and_requested(self, data_access, campaign):
        service = CampaignService(data_access)
        other = service.create({"maxDonation": 20}, BOB)["insertedId"]
        paused = service.create({"maxDonation": 20}, BOB)["insertedId"]
        service.toggle_pause(paused)

        assert [c["id"] for c in service.limited(exclude=campaign)] == [other]

    def test_campaign_patch_rejects_bad_limits(self, data_access, campaign):
        service = CampaignService(data_access)

        with pytest.raises(InvalidInputError):
            service.update(campaign, {"maxDonation": "lots"}, ALICE)
        with pytest.raises(InvalidInputError):
            service.update(campaign, {"isPaused": "yes"}, ALICE)

        stored = service.get(campaign)
        assert (stored["maxDonation"], stored["isPaused"]) == (100, False)

    def test_campaign_patch_stores_limit_in_cents(self, data_access, campaign):
        service = CampaignService(data_access)

        service.update(campaign, {"maxDonation": "150.005"}, ALICE)

        assert service.get(campaign)["maxDonation"] == 150.01

    def test_upserted_campaign_is_owned_by_the_caller(self, data_access):
        service = CampaignService(data_access)

        result = service.update("missing", {"maxDonation": 30, "currentDonation": 29}, BOB, upsert=True)

        created = service.get(result["upsertedId"])
        assert created["addedBy"] == BOB
        assert (created["maxDonation"], created["currentDonation"], created["donors"]) == (30, 0, 0)
        assert created["isPaused"] is False


class TestAmounts:

    def test_amount_is_rounded_to_cents_before_storing(self, data_access, campaign):
        service = DonationService(data_access)

        inserted = service.donate(
            {"campaignId": campaign, "donatedAmount": "1.0000000000000000000000000000000000000001"}, BOB
        )

        assert data_access.donations.get(inserted["insertedId"])["donatedAmount"] == 1
        assert data_access.campaigns.get(campaign)["currentDonation"] == 91

    @pytest.mark.parametrize("amount", ["0.001", "0.004", "1e40"])
    def test_unrepresentable_amounts_change_nothing(self, data_access, campaign, amount):
        with pytest.raises(InvalidInputError):
            DonationService(data_access).donate({"campaignId": campaign, "donatedAmount": amount}, BOB)

        assert data_access.donations.count() == 0
        assert data_access.campaigns.get(campaign)["currentDonation"] == 90


class TestConcurrentChanges:
    """The campaign moves between the capacity check and the write."""

    def test_donation_against_a_stale_total_is_rejected(self, data_access, campaign):
        stale = data_access.campaigns.get(campaign)
        data_access.campaigns.add(campaign, {"currentDonation": 10, "donors": 1})
        fresh = data_access.campaigns.get(campaign)
        service = DonationService(data_access)

        with patch.object(data_access.campaigns, "get", side_effect=[stale, fresh]):
            with pytest.raises(InvalidInputError) as exc:
                service.donate({"campaignId": campaign, "donatedAmount": 5}, BOB)

        assert "Remaining amount: 0" in exc.value.message
        assert data_access.donations.count() == 0
        assert data_access.campaigns.get(campaign)["currentDonation"] == 100

    def test_donation_against_a_changed_limit_is_rejected(self, data_access, campaign):
        stale = data_access.campaigns.get(campaign)
        data_access.campaigns.update(campaign, {"maxDonation": 200})
        fresh = data_access.campaigns.get(campaign)
        service = DonationService(data_access)

        with patch.object(data_access.campaigns, "get", side_effect=[stale, fresh]):
            with pytest.raises(InvalidInputError) as exc:
                service.donate({"campaignId": campaign, "donatedAmount": 5}, BOB)

        assert "changed while donating" in exc.value.message
        assert data_access.donations.count() == 0
        assert data_access.campaigns.get(campaign)["currentDonation"] == 90

    def test_donation_to_a_campaign_paused_meanwhile_is_rejected(self, data_access, campaign):
        stale = data_access.campaigns.get(campaign)
        data_access.campaigns.toggle(campaign, "isPaused")
        fresh = data_access.campaigns.get(campaign)
        service = DonationService(data_access)

        with patch.object(data_access.campaigns, "get", side_effect=[stale, fresh]):
            with pytest.raises(InvalidInputError) as exc:
                service.donate({"campaignId": campaign, "donatedAmount": 5}, BOB)

        assert "paused" in exc.value.message
        assert data_access.donations.count() == 0

    def test_increment_against_a_stale_total_is_rejected(self, data_access, campaign):
        stale = data_access.campaigns.get(campaign)
        data_access.campaigns.add(campaign, {"currentDonation": 8, "donors": 1})
        fresh = data_access.campaigns.get(campaign)
        service = CampaignService(data_access)

        with patch.object(data_access.campaigns, "get", side_effect=[stale, fresh]):
            with pytest.raises(InvalidInputError) as exc:
                service.add_donation(campaign, 5)

        assert "Remaining amount: 2" in exc.value.message
        updated = data_access.campaigns.get(campaign)
        assert (updated["currentDonation"], updated["donors"]) == (98, 4)

    def test_increment_against_a_changed_limit_is_rejected(self, data_access, campaign):
        stale = data_access.campaigns.get(campaign)
        data_access.campaigns.update(campaign, {"maxDonation": 200})
        fresh = data_access.campaigns.get(campaign)

        with patch.object(data_access.campaigns, "get", side_effect=[stale, fresh]):
            with pytest.raises(InvalidInputError) as exc:
                CampaignService(data_access).add_donation(campaign, 5)

        assert "changed while donating" in exc.value.message
        assert data_access.campaigns.get(campaign)["currentDonation"] == 90
