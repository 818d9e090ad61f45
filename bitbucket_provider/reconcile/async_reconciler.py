"""
Async repository reconciler.

Same state machine as RepositoryReconciler over an AsyncRepositoryService.
Cancelling the awaiting task aborts the in-flight request and stops the
sequence where it is.
"""

from bitbucket_provider.clients.protocol import AsyncRepositoryService
from bitbucket_provider.exceptions import NotFoundError
from bitbucket_provider.logging import get_logger
from bitbucket_provider.reconcile.diff import (
    attribute_drift,
    groups_equal,
    plan_group_changes,
)
from bitbucket_provider.types.desired import DesiredRepository, ReconciliationOutcome
from bitbucket_provider.types.repos import Repository

logger = get_logger("reconcile")


class AsyncRepositoryReconciler:
    """Converges Bitbucket repositories toward their desired state, asynchronously."""

    def __init__(self, service: AsyncRepositoryService) -> None:
        self.service = service

    async def observe(self, desired: DesiredRepository) -> ReconciliationOutcome:
        """Compare the desired repository against the server."""
        ref = desired.ref
        try:
            remote = await self.service.get(ref)
        except NotFoundError:
            logger.info("Repository %s does not exist", ref)
            return ReconciliationOutcome(exists=False)

        drift = attribute_drift(desired, remote)
        if drift:
            logger.info("Repository %s is out of date: %s", ref, ", ".join(drift))
            return ReconciliationOutcome(
                exists=True, up_to_date=False, id=remote.id, drift=drift
            )

        groups = await self.service.get_groups(ref)
        if not groups_equal(desired.groups, groups):
            logger.info("Repository %s is out of date: groups", ref)
            return ReconciliationOutcome(
                exists=True, up_to_date=False, id=remote.id, drift=("groups",)
            )

        logger.debug("Repository %s is up to date", ref)
        return ReconciliationOutcome(exists=True, up_to_date=True, id=remote.id)

    async def create(self, desired: DesiredRepository) -> Repository:
        """Create the repository, then grant each desired group in order."""
        logger.info("Creating repository %s", desired.ref)
        repository = await self.service.create(desired.to_repository())

        for grant in desired.groups:
            logger.info(
                "Granting %s to group %s on %s", grant.permission, grant.name, desired.ref
            )
            await self.service.add_group(desired.ref, grant)

        logger.info("Finished creating repository %s (id=%s)", desired.ref, repository.id)
        return repository

    async def update(self, desired: DesiredRepository) -> Repository:
        """Update the repository, then upsert desired grants and prune the rest."""
        logger.info("Updating repository %s", desired.ref)
        repository = await self.service.update(desired.to_repository())

        current = await self.service.get_groups(desired.ref)
        plan = plan_group_changes(desired.groups, current)

        for grant in plan.upserts:
            logger.info(
                "Granting %s to group %s on %s", grant.permission, grant.name, desired.ref
            )
            await self.service.add_group(desired.ref, grant)

        for grant in plan.revokes:
            logger.info("Revoking group %s on %s", grant.name, desired.ref)
            await self.service.revoke_group(desired.ref, grant)

        logger.info("Finished updating repository %s", desired.ref)
        return repository

    async def delete(self, desired: DesiredRepository) -> None:
        """Delete the repository."""
        logger.info("Deleting repository %s", desired.ref)
        await self.service.delete(desired.ref)
