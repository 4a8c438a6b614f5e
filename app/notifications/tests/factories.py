"""
Factory Boy factories for notification models.

Usage:
    from notifications.tests.factories import (
        DeviceRegistrationFactory,
        NotificationEventFactory,
    )

    DeviceRegistrationFactory(user=account)
    NotificationEventFactory(user=account, type="reply", origin_address="0xb0b...")
"""

import factory

from approvals.tests.factories import AppAccountFactory


class DeviceRegistrationFactory(factory.django.DjangoModelFactory):
    """Device with a valid 64-hex APNs token."""

    class Meta:
        model = "notifications.DeviceRegistration"

    user = factory.SubFactory(AppAccountFactory)
    device_token = factory.Sequence(lambda n: f"{n:064x}")


class NotificationEventFactory(factory.django.DjangoModelFactory):
    """
    Reply event by default.

    Examples:
        # Groupable reaction
        NotificationEventFactory(
            user=account,
            type="reaction",
            reaction_type="like",
            group_key="reaction:0xparent:like",
        )
    """

    class Meta:
        model = "notifications.NotificationEvent"

    user = factory.SubFactory(AppAccountFactory)
    type = "reply"
    origin_address = factory.Sequence(lambda n: f"0x{0xC000 + n:040x}")
    chain_id = 8453
    subject_comment_id = factory.Sequence(lambda n: f"0x{n:064x}")
    title = factory.Faker("sentence", nb_words=4)
    body = factory.Faker("sentence", nb_words=8)
    data = factory.LazyAttribute(
        lambda obj: {"type": obj.type, "actorAddress": obj.origin_address}
    )
