"""
Drift detection between a desired repository and the server's copy.

These functions are pure; the reconcilers feed them what they fetched.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from bitbucket_provider.types.desired import DesiredRepository
from bitbucket_provider.types.repos import GroupGrant, Repository


def attribute_drift(desired: DesiredRepository, remote: Repository) -> tuple[str, ...]:
    """
    Name the repository attributes that differ from the desired state.

    The server omits empty descriptions, so None and "" compare equal.

    Returns:
        Names of drifted fields, in check order ("description", "public")
    """
    drift: list[str] = []
    if (desired.description or "") != (remote.description or ""):
        drift.append("description")
    if desired.public != remote.public:
        drift.append("public")
    return tuple(drift)


def groups_equal(desired: Iterable[GroupGrant], remote: Iterable[GroupGrant]) -> bool:
    """
    Compare two grant collections as sets of (name, permission) pairs.

    Order is irrelevant. A missing group, an extra group, or a different
    permission on a shared group all make the collections unequal.
    """
    desired = list(desired)
    remote = list(remote)
    if len(desired) != len(remote):
        return False

    remote_pairs = {(g.name, g.permission) for g in remote}
    return all((g.name, g.permission) in remote_pairs for g in desired)


@dataclass(frozen=True)
class GroupChangePlan:
    """Grant calls needed to converge a repository's group permissions."""

    upserts: tuple[GroupGrant, ...]
    revokes: tuple[GroupGrant, ...]


def plan_group_changes(
    desired: Sequence[GroupGrant], remote: Iterable[GroupGrant]
) -> GroupChangePlan:
    """
    Plan upsert-then-prune for group permissions.

    Every desired grant is upserted, since granting overwrites an existing
    permission. Remote grants whose group is not desired at all are revoked.
    """
    desired_names = {g.name for g in desired}
    return GroupChangePlan(
        upserts=tuple(desired),
        revokes=tuple(g for g in remote if g.name not in desired_names),
    )
