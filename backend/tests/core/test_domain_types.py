"""Domain types - closed value sets and caller options."""

from marketing_api.core.domain_types import (
    ActionKey, CampaignStatus, MarketingOptions, VendorKind,
)


def test_vendor_kind_is_closed():
    assert {k.value for k in VendorKind} == {"Platform", "Agency", "Creator", "Other"}


def test_campaign_status_values():
    assert {s.value for s in CampaignStatus} == {
        "planned", "active", "paused", "completed", "cancelled",
    }


def test_action_keys_are_marketing_scoped():
    assert all(a.value.startswith("marketing.") for a in ActionKey)


def test_linking_required_needs_both_flags():
    assert not MarketingOptions(require_project_linking=True).linking_required
    assert MarketingOptions(True, True).linking_required
    assert not MarketingOptions(True, False).linking_required
