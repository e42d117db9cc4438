"""ORM Models — SQLAlchemy declarative models for all debate entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Table shapes match the head Alembic revision; migrations, not create_all,
      build real stores

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from debatekb.models.tag import Tag  # noqa: F401
from debatekb.models.source import Source  # noqa: F401
from debatekb.models.topic import Topic  # noqa: F401
from debatekb.models.claim import Claim  # noqa: F401
from debatekb.models.rebuttal import Rebuttal  # noqa: F401
from debatekb.models.evidence import Evidence  # noqa: F401
from debatekb.models.question import Question  # noqa: F401
from debatekb.models.fallacy import Fallacy  # noqa: F401
