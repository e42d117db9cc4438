"""Fallacy Catalog — static reference data seeded into the fallacies table.

Invariants:
    - Catalog ids are stable snake_case slugs; claims and rebuttals reference them
    - Seeded rows have is_custom = False; user-created fallacies never collide with a slug
    - Catalog content is frozen once a migration has seeded it (new entries need a
      new revision, never an edit to 0008's input)
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogFallacy:
    id: str
    name: str
    description: str
    example: str
    category: str


CATALOG: tuple[CatalogFallacy, ...] = (
    CatalogFallacy(
        "ad_hominem", "Ad Hominem",
        "Attacking the person instead of their argument",
        "You can't be right, you're too young",
        "relevance",
    ),
    CatalogFallacy(
        "straw_man", "Straw Man",
        "Distorting the opponent's argument to refute it more easily",
        "You want to regulate guns? So you want to disarm everyone!",
        "relevance",
    ),
    CatalogFallacy(
        "appeal_to_ignorance", "Appeal to Ignorance",
        "Claiming a proposition is true because it has not been proven false",
        "Nobody has proven ghosts don't exist, so they exist",
        "evidence",
    ),
    CatalogFallacy(
        "post_hoc", "Post Hoc Ergo Propter Hoc",
        "Confusing correlation with causation",
        "I wore this hat and won, so the hat brings luck",
        "causal",
    ),
    CatalogFallacy(
        "false_dilemma", "False Dilemma",
        "Presenting only two options when others exist",
        "Either you are with us or against us",
        "structure",
    ),
    CatalogFallacy(
        "begging_question", "Begging the Question",
        "Assuming what one is trying to prove",
        "This book is true because it says it is true",
        "structure",
    ),
    CatalogFallacy(
        "slippery_slope", "Slippery Slope",
        "Claiming an action will inevitably lead to extreme consequences",
        "If we allow this, soon everything will be allowed",
        "causal",
    ),
    CatalogFallacy(
        "postdiction", "Postdiction",
        "Fitting a prediction to events after they happened",
        "The prophecy was vague, but now we see it meant this war",
        "evidence",
    ),
    CatalogFallacy(
        "cherry_picking", "Cherry Picking",
        "Selecting only the data that supports a conclusion",
        "Three sunny days prove the climate is getting drier",
        "evidence",
    ),
    CatalogFallacy(
        "appeal_to_tradition", "Appeal to Tradition",
        "Claiming something is right because it has always been done",
        "We have always done it this way, so it must be correct",
        "relevance",
    ),
    CatalogFallacy(
        "appeal_to_authority", "Appeal to Authority",
        "Accepting a claim because an authority figure endorses it",
        "A famous actor says this diet works, so it works",
        "relevance",
    ),
    CatalogFallacy(
        "appeal_to_popularity", "Appeal to Popularity",
        "Claiming something is true because many people believe it",
        "Millions of people use this remedy, so it must be effective",
        "relevance",
    ),
    CatalogFallacy(
        "circular_reasoning", "Circular Reasoning",
        "Using the conclusion as a premise",
        "He is trustworthy because he tells the truth",
        "structure",
    ),
    CatalogFallacy(
        "tu_quoque", "Tu Quoque",
        "Dismissing criticism by pointing out the critic's hypocrisy",
        "You say smoking is bad, but you smoke too",
        "relevance",
    ),
    CatalogFallacy(
        "hasty_generalization", "Hasty Generalization",
        "Drawing a general conclusion from too few cases",
        "I met two rude tourists, so all tourists are rude",
        "evidence",
    ),
)

CATALOG_IDS: frozenset[str] = frozenset(f.id for f in CATALOG)
