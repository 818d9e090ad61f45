"""
Repository reconciler.

Observes a repository on the server and converges it toward a desired
state. Holds no state between calls: every observe re-reads the server,
so a pass can be re-run at any time after a crash or restart. Each call is
a single attempt; retry and scheduling belong to the caller, which must
not run two calls for the same repository at once.
"""

from bitbucket_provider.clients.protocol import RepositoryService
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


class RepositoryReconciler:
    """
    Converges Bitbucket repositories toward their desired state.

    Each network call is bounded by the transport timeout but cannot be
    interrupted; use AsyncRepositoryReconciler and cancel its task when a
    pass must be abandoned early.
    """

    def __init__(self, service: RepositoryService) -> None:
        """
        Initialize the reconciler.

        Args:
            service: Repository operations, e.g. ``BitbucketClient.repos``
        """
        self.service = service

    def observe(self, desired: DesiredRepository) -> ReconciliationOutcome:
        """
        Compare the desired repository against the server.

        A missing repository is reported as an outcome, not an error.

        Args:
            desired: Desired repository state

        Returns:
            ReconciliationOutcome with exists/up_to_date and the remote id

        Raises:
            BitbucketError: For any failure other than the repository being absent
        """
        ref = desired.ref
        try:
            remote = self.service.get(ref)
        except NotFoundError:
            logger.info("Repository %s does not exist", ref)
            return ReconciliationOutcome(exists=False)

        drift = attribute_drift(desired, remote)
        if drift:
            logger.info("Repository %s is out of date: %s", ref, ", ".join(drift))
            return ReconciliationOutcome(
                exists=True, up_to_date=False, id=remote.id, drift=drift
            )

        groups = self.service.get_groups(ref)
        if not groups_equal(desired.groups, groups):
            logger.info("Repository %s is out of date: groups", ref)
            return ReconciliationOutcome(
                exists=True, up_to_date=False, id=remote.id, drift=("groups",)
            )

        logger.debug("Repository %s is up to date", ref)
        return ReconciliationOutcome(exists=True, up_to_date=True, id=remote.id)

    def create(self, desired: DesiredRepository) -> Repository:
        """
        Create the repository, then grant each desired group in order.

        The first failing grant aborts the sequence. Grants already applied
        and the repository itself are left in place.

        Args:
            desired: Desired repository state

        Returns:
            The created Repository
        """
        logger.info("Creating repository %s", desired.ref)
        repository = self.service.create(desired.to_repository())

        for grant in desired.groups:
            logger.info(
                "Granting %s to group %s on %s", grant.permission, grant.name, desired.ref
            )
            self.service.add_group(desired.ref, grant)

        logger.info("Finished creating repository %s (id=%s)", desired.ref, repository.id)
        return repository

    def update(self, desired: DesiredRepository) -> Repository:
        """
        Update the repository, then upsert desired grants and prune the rest.

        All upserts run before any revocation. The first failing call aborts
        the sequence; changes already applied are not undone.

        Args:
            desired: Desired repository state

        Returns:
            The updated Repository
        """
        logger.info("Updating repository %s", desired.ref)
        repository = self.service.update(desired.to_repository())

        current = self.service.get_groups(desired.ref)
        plan = plan_group_changes(desired.groups, current)

        for grant in plan.upserts:
            logger.info(
                "Granting %s to group %s on %s", grant.permission, grant.name, desired.ref
            )
            self.service.add_group(desired.ref, grant)

        for grant in plan.revokes:
            logger.info("Revoking group %s on %s", grant.name, desired.ref)
            self.service.revoke_group(desired.ref, grant)

        logger.info("Finished updating repository %s", desired.ref)
        return repository

    def delete(self, desired: DesiredRepository) -> None:
        """
        Delete the repository. Its permissions go with it on the server.

        Args:
            desired: Desired repository state
        """
        logger.info("Deleting repository %s", desired.ref)
        self.service.delete(desired.ref)
