"""Merge Engine — verifies classification precedence, isolation and aliasing.

Tests:
    - Re-importing the same snapshot: created=1 then duplicates=1
    - Id match updates only when incoming updatedAt is strictly newer
    - Fingerprint match is a duplicate even under a different id
    - Near-duplicates are reported, never written
    - One malformed item among ten: nine classified, one error, nothing else lost
    - Unsupported format version raises before any write
    - Children of a deduplicated parent attach to the surviving local row
    - Tag labels match case-insensitively, accented capitals included
    - Rebuttal/Evidence near-duplicates are scanned among siblings of one claim
    - Topics dedup on title + sorted tags; same title with other tags is reviewed
"""

import pytest

from debatekb.core.errors import SnapshotFormatError, UnsupportedSnapshotVersionError
from debatekb.services.merge_engine import MergeEngine
from debatekb.services.repositories import (
    ClaimRepository, EvidenceRepository, QuestionRepository, RebuttalRepository,
    SourceRepository, TagRepository, TopicRepository,
)
from tests.services.snapshot_factory import LATER, STAMP, claim, encode, snapshot

DISTINCT_TEXTS = [
    "Nuclear power is the safest energy source per terawatt hour",
    "School uniforms reduce bullying",
    "Minimum wage increases cause unemployment among teenagers",
    "Social media harms adolescent mental health",
    "Remote work improves productivity for software teams",
    "Organic farming cannot feed eight billion people",
    "Standardized tests predict college success",
    "Universal basic income discourages work",
    "Rent control lowers housing supply over time",
    "Electric cars emit less carbon across their lifetime",
]


async def _import(manager, document, threshold: float = 0.9):
    async with manager.session() as db:
        report = await MergeEngine(db, threshold).run(encode(document))
        await db.commit()
    return report


async def test_reimport_same_snapshot_is_duplicate(test_manager):
    document = snapshot(claims=[claim("c1", "Nuclear power is safe")])

    first = await _import(test_manager, document)
    second = await _import(test_manager, document)

    assert (first.created, first.total_items) == (1, 1)
    assert (second.duplicates, second.created, second.total_items) == (1, 0, 1)


async def test_newer_updated_at_updates(test_manager):
    await _import(test_manager, snapshot(claims=[claim("c1", "Old wording")]))
    report = await _import(
        test_manager,
        snapshot(claims=[claim("c1", "A completely rewritten statement", updated_at=LATER)]),
    )

    assert report.updated == 1
    async with test_manager.session() as db:
        stored = await ClaimRepository(db).get("c1")
        assert stored.text == "A completely rewritten statement"
        assert stored.updated_at == LATER
        assert stored.created_at == STAMP


async def test_older_updated_at_is_duplicate(test_manager):
    await _import(test_manager, snapshot(claims=[claim("c1", "Kept", updated_at=LATER)]))
    report = await _import(test_manager, snapshot(claims=[claim("c1", "Stale edit")]))

    assert report.duplicates == 1
    async with test_manager.session() as db:
        assert (await ClaimRepository(db).get("c1")).text == "Kept"


async def test_fingerprint_match_is_duplicate(test_manager):
    await _import(test_manager, snapshot(claims=[claim("c1", "Nuclear power is safe")]))
    report = await _import(test_manager, snapshot(claims=[claim("c2", "  nuclear POWER is safe!")]))

    assert report.duplicates == 1
    async with test_manager.session() as db:
        assert await ClaimRepository(db).get("c2") is None


async def test_near_duplicate_reported_not_written(test_manager):
    await _import(
        test_manager, snapshot(claims=[claim("c1", "The death penalty deters violent crime")]),
    )
    report = await _import(
        test_manager, snapshot(claims=[claim("c2", "The death penalty deters violent crimes")]),
    )

    assert report.near_duplicates == 1
    review = report.items_for_review[0]
    assert (review.incoming_id, review.existing_id) == ("c2", "c1")
    assert review.entity_type == "claim"
    assert 0.9 <= review.similarity_score < 1.0
    async with test_manager.session() as db:
        assert await ClaimRepository(db).get("c2") is None


async def test_threshold_controls_near_duplicates(test_manager):
    await _import(
        test_manager, snapshot(claims=[claim("c1", "The death penalty deters violent crime")]),
    )
    report = await _import(
        test_manager,
        snapshot(claims=[claim("c2", "The death penalty deters violent crimes")]),
        threshold=0.99,
    )
    assert report.created == 1


async def test_malformed_item_is_isolated(test_manager):
    items = [claim(f"c{i}", text) for i, text in enumerate(DISTINCT_TEXTS, start=1)]
    del items[4]["text"]

    report = await _import(test_manager, snapshot(claims=items))

    assert report.total_items == 10
    assert report.created == 9
    assert report.errors == 1
    assert report.error_messages[0].startswith("Claim c5:")
    assert report.success is True
    async with test_manager.session() as db:
        assert await ClaimRepository(db).count() == 9
        assert await ClaimRepository(db).get("c5") is None


async def test_unsupported_version_writes_nothing(test_manager):
    document = snapshot(format_version="2.0", claims=[claim("c1", "Never stored")])
    async with test_manager.session() as db:
        with pytest.raises(UnsupportedSnapshotVersionError):
            await MergeEngine(db).run(encode(document))

    async with test_manager.session() as db:
        assert await ClaimRepository(db).count() == 0


async def test_invalid_document_raises(test_manager):
    async with test_manager.session() as db:
        with pytest.raises(SnapshotFormatError):
            await MergeEngine(db).run(b"{truncated")


async def test_full_graph_imports_in_dependency_order(test_manager):
    document = snapshot(
        questions=[{"id": "q1", "targetId": "t1", "text": "Which costs count?", "kind": "socratic"}],
        evidences=[{
            "id": "e1", "claimId": "c1", "content": "LCOE fell 90% since 2010",
            "type": "statistic", "quality": "high", "sourceId": "s1",
        }],
        rebuttals=[{"id": "r1", "claimId": "c1", "text": "Intermittency adds cost"}],
        claims=[claim("c1", "Solar is the cheapest electricity", topics=["t1"])],
        topics=[{"id": "t1", "title": "Energy prices", "tags": ["g1"]}],
        sources=[{"id": "s1", "title": "Lazard LCOE 2023", "publisher": "Lazard"}],
        tags=[{"id": "g1", "label": "energy"}],
    )

    report = await _import(test_manager, document)

    assert report.created == 7
    assert report.errors == 0
    async with test_manager.session() as db:
        evidence = await EvidenceRepository(db).get("e1")
        assert evidence.source_id == "s1"
        assert (await QuestionRepository(db).get("q1")).target_id == "t1"
        assert (await TopicRepository(db).get("t1")).tags == ["g1"]


async def test_dangling_parent_is_item_error(test_manager):
    document = snapshot(
        rebuttals=[{"id": "r1", "claimId": "missing", "text": "Orphaned rebuttal"}],
        questions=[{"id": "q1", "targetId": "missing", "text": "About nothing?"}],
    )
    report = await _import(test_manager, document)

    assert report.errors == 2
    assert report.error_messages[0].startswith("Rebuttal r1:")
    assert report.error_messages[1].startswith("Question q1:")


async def test_children_follow_deduplicated_parent(test_manager):
    await _import(test_manager, snapshot(claims=[claim("local", "Nuclear power is safe")]))
    document = snapshot(
        claims=[claim("remote", "Nuclear power is safe.")],
        rebuttals=[{"id": "r1", "claimId": "remote", "text": "Chernobyl happened"}],
        questions=[{"id": "q1", "targetId": "remote", "text": "Safe compared to what?"}],
    )

    report = await _import(test_manager, document)

    assert (report.duplicates, report.created, report.errors) == (1, 2, 0)
    async with test_manager.session() as db:
        assert (await RebuttalRepository(db).get("r1")).claim_id == "local"
        assert (await QuestionRepository(db).get("q1")).target_id == "local"


async def test_tag_label_match_aliases_topic_tags(test_manager):
    async with test_manager.session() as db:
        await TagRepository(db).create(id="local-tag", label="Ethics")
        await db.commit()
    document = snapshot(
        tags=[{"id": "remote-tag", "label": "ethics"}],
        topics=[{"id": "t1", "title": "Euthanasia", "tags": ["remote-tag"]}],
    )

    report = await _import(test_manager, document)

    assert (report.duplicates, report.created) == (1, 1)
    async with test_manager.session() as db:
        assert (await TopicRepository(db).get("t1")).tags == ["local-tag"]
        assert await TagRepository(db).count() == 1


async def test_accented_tag_label_is_duplicate(test_manager):
    async with test_manager.session() as db:
        await TagRepository(db).create(id="local-tag", label="État")
        await db.commit()

    report = await _import(test_manager, snapshot(tags=[{"id": "remote", "label": "État"}]))

    assert (report.duplicates, report.created) == (1, 0)
    async with test_manager.session() as db:
        assert await TagRepository(db).count() == 1


async def test_sibling_rebuttals_flagged_per_claim(test_manager):
    await _import(test_manager, snapshot(
        claims=[claim("c1", "Nuclear power is safe"), claim("c2", "Coal is dirty")],
        rebuttals=[{"id": "r1", "claimId": "c1", "text": "Chernobyl happened"}],
    ))

    report = await _import(test_manager, snapshot(rebuttals=[
        {"id": "r2", "claimId": "c1", "text": "Chernobyl happened!!"},
        {"id": "r3", "claimId": "c1", "text": "Chernobyl happend"},
        # same text under another claim is not a sibling
        {"id": "r4", "claimId": "c2", "text": "Chernobyl happened"},
    ]))

    assert (report.near_duplicates, report.created) == (2, 1)
    assert {r.incoming_id for r in report.items_for_review} == {"r2", "r3"}
    assert all(r.existing_id == "r1" for r in report.items_for_review)
    assert all(r.entity_type == "rebuttal" for r in report.items_for_review)
    async with test_manager.session() as db:
        assert await RebuttalRepository(db).get("r2") is None
        assert (await RebuttalRepository(db).get("r4")).claim_id == "c2"


async def test_sibling_evidence_flagged_per_claim(test_manager):
    await _import(test_manager, snapshot(
        claims=[claim("c1", "Solar is cheap")],
        evidences=[{"id": "e1", "claimId": "c1", "content": "LCOE fell 90% since 2010"}],
    ))

    report = await _import(test_manager, snapshot(evidences=[
        {"id": "e2", "claimId": "c1", "content": "LCOE fell 90% since 2010."},
    ]))

    assert report.near_duplicates == 1
    assert report.items_for_review[0].existing_id == "e1"
    async with test_manager.session() as db:
        assert await EvidenceRepository(db).count() == 1


async def test_topic_fingerprint_dedup_ignores_tag_order(test_manager):
    await _import(test_manager, snapshot(
        topics=[{"id": "t1", "title": "Energy policy", "tags": ["g1", "g2"]}],
    ))

    report = await _import(test_manager, snapshot(
        topics=[{"id": "t2", "title": "energy POLICY", "tags": ["g2", "g1"]}],
    ))

    assert report.duplicates == 1
    async with test_manager.session() as db:
        assert await TopicRepository(db).count() == 1


async def test_topic_same_title_other_tags_is_reviewed(test_manager):
    await _import(test_manager, snapshot(
        topics=[{"id": "t1", "title": "Energy policy", "tags": ["g1"]}],
    ))

    report = await _import(test_manager, snapshot(
        topics=[{"id": "t2", "title": "Energy policy", "tags": ["g3"]}],
    ))

    assert (report.near_duplicates, report.created, report.duplicates) == (1, 0, 0)
    review = report.items_for_review[0]
    assert (review.entity_type, review.existing_id) == ("topic", "t1")
    assert review.similarity_score == 1.0
    async with test_manager.session() as db:
        assert await TopicRepository(db).get("t2") is None


async def test_source_fingerprint_dedup(test_manager):
    await _import(test_manager, snapshot(sources=[
        {"id": "s1", "title": "World Energy Outlook", "publisher": "IEA", "url": "https://iea.org/weo"},
    ]))
    report = await _import(test_manager, snapshot(sources=[
        {"id": "s2", "title": "world energy outlook", "publisher": "iea", "url": "http://iea.org/weo"},
    ]))

    assert report.duplicates == 1
    async with test_manager.session() as db:
        assert await SourceRepository(db).count() == 1
