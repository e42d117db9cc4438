"""Services Layer — repositories, the merge engine and snapshot transfer.

Invariants:
    - Repositories flush, services decide when to commit
    - The merge engine never commits; SnapshotTransferService owns its transaction

Design Decisions:
    - One generic Repository with per-entity hooks (no class per operation)
"""
