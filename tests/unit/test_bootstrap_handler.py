"""BootstrapHandler unit tests: each terminal outcome of check, wait, recheck."""

from app.application.services.bootstrap_handler import BootstrapHandler, BootstrapOutcome
from app.domain.enums import Role


async def test_unclaimed_account_gets_default_role(bootstrap, identity, principal_repo):
    identity.add_account("u-1", "u@example.com")

    outcome = await bootstrap.on_account_created("u-1", "u@example.com")

    assert outcome == BootstrapOutcome.DEFAULT_ASSIGNED
    assert identity.accounts["u-1"].custom_claims == {"role": "standard_user"}
    principal = principal_repo.principals["u-1"]
    assert principal.role == Role.STANDARD_USER
    assert principal.email == "u@example.com"


async def test_already_provisioned_account_is_left_alone(bootstrap, identity, principal_repo):
    identity.add_account("u-1", "s@example.com", {"role": "sales_agent"})

    outcome = await bootstrap.on_account_created("u-1")

    assert outcome == BootstrapOutcome.ALREADY_PROVISIONED
    assert identity.accounts["u-1"].custom_claims == {"role": "sales_agent"}
    assert identity.calls == []
    assert principal_repo.writes == 0


async def test_role_written_during_delay_is_not_overwritten(identity, principal_repo):
    identity.add_account("u-1", "cm@example.com")
    delays = []

    async def provisioning_sleep(seconds: float) -> None:
        delays.append(seconds)
        identity.accounts["u-1"].custom_claims["role"] = "content_manager"

    handler = BootstrapHandler(
        identity, principal_repo, recheck_delay_seconds=1.5, sleep=provisioning_sleep
    )
    outcome = await handler.on_account_created("u-1")

    assert outcome == BootstrapOutcome.PROVISIONED_CONCURRENTLY
    assert delays == [1.5]
    assert identity.accounts["u-1"].custom_claims == {"role": "content_manager"}
    assert principal_repo.writes == 0


async def test_account_deleted_before_handler_runs(bootstrap, principal_repo):
    assert await bootstrap.on_account_created("gone") == BootstrapOutcome.ACCOUNT_MISSING
    assert principal_repo.writes == 0


async def test_account_deleted_during_delay(identity, principal_repo):
    identity.add_account("u-1")

    async def deleting_sleep(_: float) -> None:
        del identity.accounts["u-1"]

    handler = BootstrapHandler(identity, principal_repo, sleep=deleting_sleep)
    assert await handler.on_account_created("u-1") == BootstrapOutcome.ACCOUNT_MISSING
    assert principal_repo.writes == 0


async def test_unknown_role_claim_counts_as_unclaimed(bootstrap, identity):
    identity.add_account("u-1", claims={"role": "superuser"})
    assert await bootstrap.on_account_created("u-1") == BootstrapOutcome.DEFAULT_ASSIGNED
    assert identity.accounts["u-1"].custom_claims == {"role": "standard_user"}


async def test_accounts_created_by_lifecycle_service_keep_their_role(
    lifecycle, bootstrap, identity, principal_repo, admin
):
    uid = await lifecycle.create_sales_agent(admin, "a@example.com", "secret1", "Ana")
    assert await bootstrap.on_account_created(uid) == BootstrapOutcome.ALREADY_PROVISIONED
    assert principal_repo.principals[uid].role == Role.SALES_AGENT
