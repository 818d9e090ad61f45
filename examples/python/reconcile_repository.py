#!/usr/bin/env python3
"""
Bitbucket provider - single reconciliation pass example.

Observes one repository and creates or updates it as needed:
1. Connect (configuration from BITBUCKET_* environment variables)
2. Observe the desired repository
3. Create it when missing, update it when out of date

Run with: python examples/python/reconcile_repository.py
"""

import logging
import sys

from bitbucket_provider import (
    BitbucketError,
    DesiredRepository,
    RepositoryReconciler,
    ResourceState,
    configure_logging,
    connect_from_env,
)


def main() -> int:
    """Run one reconciliation pass."""
    configure_logging(level=logging.INFO)

    desired = DesiredRepository.build(
        name="example-service",
        project="CORE",
        description="Managed by the Bitbucket provider example",
        groups=[("developers", "REPO_WRITE"), ("release-managers", "REPO_ADMIN")],
    )

    try:
        with connect_from_env() as client:
            reconciler = RepositoryReconciler(client.repos)

            outcome = reconciler.observe(desired)
            print(f"{desired.ref}: {outcome.state.value}")

            if outcome.state == ResourceState.MISSING:
                created = reconciler.create(desired)
                print(f"   Created with id {created.id}")
            elif outcome.state == ResourceState.OUT_OF_DATE:
                print(f"   Drifted fields: {', '.join(outcome.drift)}")
                reconciler.update(desired)
                print("   Updated")
    except BitbucketError as e:
        print(f"Reconciliation failed ({e.kind.value}): {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
