"""Infrastructure Layer — database sessions, schema migrations and logging.

Invariants:
    - Infrastructure maps driver exceptions to the core error hierarchy
    - Nothing here decides merge or validation outcomes (that is core/)

Design Decisions:
    - One engine per process, owned by DatabaseSessionManager and shared with
      the MigrationEngine so the startup gate and the app see the same store
"""
