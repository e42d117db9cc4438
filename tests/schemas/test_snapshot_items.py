"""Snapshot Item Schemas — verifies camelCase wire mapping and per-item validation.

Tests:
    - camelCase in, snake_case ORM fields out
    - updatedAt defaults to createdAt for legacy items
    - Legacy enum labels and the legacy claimFingerprint key are accepted
    - Malformed items raise ValidationError (caught per item by the merge engine)
"""

import pytest
from pydantic import ValidationError

from debatekb.core.domain_types import EntityType, Posture, Stance, Strength
from debatekb.schemas.snapshot import (
    ITEM_MODELS, ClaimItem, EvidenceItem, SourceItem, TopicItem,
)


def test_item_models_cover_every_entity_type():
    assert set(ITEM_MODELS) == set(EntityType)


def test_camel_case_fields_map_to_orm_fields():
    item = EvidenceItem.model_validate({
        "id": "e1", "claimId": "c1", "content": "Rates fell 12%",
        "type": "stat", "sourceId": "s1",
        "createdAt": "2025-01-01T00:00:00.000Z",
    })
    fields = item.to_fields()
    assert fields["claim_id"] == "c1"
    assert fields["source_id"] == "s1"
    assert fields["type"] == "statistic"
    assert fields["updated_at"] == "2025-01-01T00:00:00.000Z"


def test_legacy_labels_and_fingerprint_key():
    claim = ClaimItem.model_validate({
        "id": "c1", "text": "Claim", "stance": "PRO", "strength": "med",
        "claimFingerprint": "0123456789abcdef",
    })
    assert claim.stance is Stance.PRO
    assert claim.strength is Strength.MEDIUM
    assert claim.fingerprint == "0123456789abcdef"
    assert "fingerprint" not in claim.to_fields()

    topic = TopicItem.model_validate({"id": "t1", "title": "T", "posture": "sceptique"})
    assert topic.posture is Posture.SKEPTICAL


def test_unknown_fields_are_ignored():
    item = SourceItem.model_validate({"id": "s1", "title": "Book", "somethingNew": 1})
    assert not hasattr(item, "somethingNew")


@pytest.mark.parametrize("raw", [
    {"id": "c1"},
    {"id": "   ", "text": "x"},
    {"id": "c1", "text": "x", "stance": "sideways"},
    {"id": "c1", "text": "x", "createdAt": "yesterday"},
    {"text": "no id"},
])
def test_malformed_claims_raise(raw):
    with pytest.raises(ValidationError):
        ClaimItem.model_validate(raw)


def test_reliability_score_bounds():
    with pytest.raises(ValidationError):
        SourceItem.model_validate({"id": "s1", "title": "Book", "reliabilityScore": 1.5})


def test_to_wire_is_camel_case():
    wire = ClaimItem.model_validate({
        "id": "c1", "text": "Claim", "fallacyIds": ["ad_hominem"],
        "createdAt": "2025-01-01T00:00:00.000Z",
    }).to_wire()
    assert wire["fallacyIds"] == ["ad_hominem"]
    assert wire["createdAt"] == wire["updatedAt"]
    assert wire["stance"] == "neutral"


def test_topic_and_source_fingerprints_export_but_never_import():
    topic = TopicItem.model_validate({"id": "t1", "title": "T", "fingerprint": "stale"})
    assert "fingerprint" not in topic.to_fields()
    assert topic.to_wire()["fingerprint"] == "stale"

    source = SourceItem.model_validate({"id": "s1", "title": "S", "fingerprint": "stale"})
    assert "fingerprint" not in source.to_fields()
    assert source.to_wire()["fingerprint"] == "stale"
