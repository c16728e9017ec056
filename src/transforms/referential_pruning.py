"""Referential pruning of orphaned child records.

Removes child records whose foreign key has no matching parent key.
The full pre-pruning child set is returned as a backup alongside the
kept and pruned records; the parent set is only read.
"""

from __future__ import annotations

from typing import Sequence

from core.errors import MalformedValueError
from core.logging_config import get_logger
from core.types import PruneResult, Record, RecordValue

_LOGGER = get_logger(__name__)


def prune_orphans(
    children: Sequence[Record],
    parents: Sequence[Record],
    foreign_key: str,
    parent_key: str,
) -> PruneResult:
    """Remove children without a parent, keeping a backup copy.

    Keys match by exact equality, so ``"567335"`` and ``567335`` do not
    match. Null foreign keys are orphans.

    Args:
        children: Child records holding the foreign key.
        parents: Parent records holding the referenced key.
        foreign_key: Child column referencing the parent.
        parent_key: Parent key column.

    Returns:
        Kept children, pruned orphans, and the full pre-pruning backup.

    Raises:
        MalformedValueError: If a record lacks its key column.
    """
    backup = tuple(children)
    known_keys = _collect_parent_keys(parents, parent_key)
    kept: list[Record] = []
    pruned: list[Record] = []
    for index, child in enumerate(backup):
        if foreign_key not in child:
            raise MalformedValueError(
                foreign_key, None, "foreign key column is missing", record_index=index
            )
        value = child[foreign_key]
        if value is not None and value in known_keys:
            kept.append(child)
        else:
            pruned.append(child)
    _LOGGER.info(
        "orphans_pruned",
        foreign_key=foreign_key,
        parent_key=parent_key,
        child_count=len(backup),
        pruned_count=len(pruned),
    )
    return PruneResult(kept=tuple(kept), pruned=tuple(pruned), backup=backup)


def _collect_parent_keys(parents: Sequence[Record], parent_key: str) -> set[RecordValue]:
    keys: set[RecordValue] = set()
    for index, parent in enumerate(parents):
        if parent_key not in parent:
            raise MalformedValueError(
                parent_key, None, "parent key column is missing", record_index=index
            )
        if parent[parent_key] is not None:
            keys.add(parent[parent_key])
    return keys
