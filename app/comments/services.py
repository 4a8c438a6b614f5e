"""
Comment enrichment: decide which notifications a comment produces.

Services:
    CommentNotificationService: Builds and enqueues NotificationJobs for a
    comment-activity job

Decision rules:
    - Reaction to a parent: notify the parent author
      ("@alice liked" when the reaction content is "like", else "@alice reacted")
    - Reply to a parent: notify the parent author ("@alice replied")
    - Every distinct mentioned address (ENS or Farcaster reference):
      "@alice mentioned you"

Usage:
    from comments.services import CommentNotificationService

    jobs = CommentNotificationService.process(CommentJob.from_dict(payload))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from comments.indexer import fetch_cached_comment
from comments.profiles import cache_author_profile
from comments.types import COMMENT_TYPE_REACTION
from core.services import BaseService
from notifications.types import NotificationJob, NotificationKind, NotificationPayload

if TYPE_CHECKING:
    from comments.types import CommentData, CommentJob

LIKE_REACTION = "like"


class CommentNotificationService(BaseService):
    """Turns comment-activity jobs into notification jobs."""

    @classmethod
    def build_notification_jobs(
        cls,
        job: CommentJob,
        comment: CommentData,
        parent: CommentData | None,
    ) -> list[NotificationJob]:
        """
        Pure decision step: which notifications does this comment produce?

        Args:
            job: The comment-activity job (carries the comment type)
            comment: The new comment
            parent: The comment being replied/reacted to, if any

        Returns:
            Ordered list of jobs: parent-author notification first, then mentions
        """
        replier = comment.author.username
        jobs: list[NotificationJob] = []

        base_data: dict[str, Any] = {
            "commentId": comment.id,
            "chainId": job.chain_id,
            "actorAddress": comment.author.address.lower(),
        }
        if parent is not None:
            base_data["parentId"] = parent.id
            base_data["parentAddress"] = parent.author.address.lower()

        if parent is not None:
            if job.is_reaction or (
                job.comment_type is None and comment.comment_type == COMMENT_TYPE_REACTION
            ):
                verb = "liked" if comment.content == LIKE_REACTION else "reacted"
                payload = NotificationPayload(
                    title=f"@{replier} {verb}",
                    body=f'"{parent.content}"',
                    data={
                        **base_data,
                        "type": NotificationKind.REACTION,
                        "reactionType": comment.content,
                    },
                )
            else:
                payload = NotificationPayload(
                    title=f"@{replier} replied",
                    body=comment.content,
                    data={**base_data, "type": NotificationKind.REPLY},
                )
            jobs.append(
                NotificationJob(
                    author=parent.author.address,
                    notification=payload,
                    chain_id=job.chain_id,
                )
            )

        for address in comment.mentioned_addresses():
            jobs.append(
                NotificationJob(
                    author=address,
                    notification=NotificationPayload(
                        title=f"@{replier} mentioned you",
                        body=comment.content,
                        data={**base_data, "type": NotificationKind.MENTION},
                    ),
                    chain_id=job.chain_id,
                )
            )

        return jobs

    @classmethod
    def load_comments(cls, job: CommentJob) -> tuple[CommentData, CommentData | None]:
        """
        Fetch the comment and, when it has one, its parent.

        Both go through the retrying, cached fetcher. A fetch failure
        propagates so the whole job fails before anything is enqueued.
        """
        comment = fetch_cached_comment(job.chain_id, job.comment_id)
        cache_author_profile(comment.author)

        parent = None
        if comment.parent_id:
            parent = fetch_cached_comment(job.chain_id, comment.parent_id)
            cache_author_profile(parent.author)

        return comment, parent

    @classmethod
    def process(cls, job: CommentJob) -> list[NotificationJob]:
        """
        Load, decide and enqueue.

        Enqueue errors propagate to the caller.

        Returns:
            The jobs that were enqueued
        """
        from notifications.tasks import deliver_notification

        logger = cls.get_logger()
        logger.info(f"Processing comment {job.comment_id} on chain {job.chain_id}")

        comment, parent = cls.load_comments(job)
        jobs = cls.build_notification_jobs(job, comment, parent)

        for notification_job in jobs:
            deliver_notification.delay(notification_job.to_dict())
            logger.info(
                f"Enqueued {notification_job.notification.data.get('type')} "
                f"notification for {notification_job.author}"
            )

        return jobs
