"""
Factory Boy factories for approval models.

Usage:
    from approvals.tests.factories import AppAccountFactory, ApprovalFactory

    app = AppAccountFactory()
    ApprovalFactory(app=app, author="0xauthor...")

    # Revoked approval
    ApprovalFactory(app=app, deleted_at=timezone.now())
"""

import factory


def hex_address(n: int) -> str:
    return f"0x{n:040x}"


class AppAccountFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = "approvals.AppAccount"
        django_get_or_create = ("id",)

    id = factory.Sequence(lambda n: hex_address(0xA000 + n))


class ApprovalFactory(factory.django.DjangoModelFactory):
    """Active approval on Base mainnet by default."""

    class Meta:
        model = "approvals.Approval"

    author = factory.Sequence(lambda n: hex_address(0xB000 + n))
    app = factory.SubFactory(AppAccountFactory)
    chain_id = 8453
    tx_hash = factory.Sequence(lambda n: f"0x{n:064x}")
    log_index = 0
    deleted_at = None
