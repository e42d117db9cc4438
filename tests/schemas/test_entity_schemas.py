"""Entity Schemas — verifies request validation for the CRUD API."""

import pytest
from pydantic import ValidationError

from debatekb.core.domain_types import QuestionKind, Strength
from debatekb.schemas.entities import (
    ClaimCreate, ClaimUpdate, QuestionCreate, SourceCreate, TagCreate,
)


def test_required_text_is_stripped_and_non_blank():
    assert TagCreate(label="  ethics ").label == "ethics"
    with pytest.raises(ValidationError):
        TagCreate(label="   ")


def test_enum_fields_accept_legacy_labels():
    assert ClaimCreate(text="x", strength="med").strength is Strength.MEDIUM
    assert QuestionCreate(target_id="t1", text="Why?", kind="SOCRATIC").kind is QuestionKind.SOCRATIC


def test_enum_fields_reject_unknown_values():
    with pytest.raises(ValidationError):
        ClaimCreate(text="x", stance="sideways")


def test_update_carries_only_sent_fields():
    body = ClaimUpdate.model_validate({"strength": "high"})
    assert body.model_dump(exclude_unset=True) == {"strength": Strength.HIGH}


def test_reliability_score_range():
    with pytest.raises(ValidationError):
        SourceCreate(title="Book", reliability_score=-0.1)
