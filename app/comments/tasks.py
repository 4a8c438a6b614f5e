"""
Celery tasks for comment enrichment.

Tasks:
    process_comment: Load a comment (and its parent) and enqueue the
    notification jobs it produces

A fetch that still fails after the local retries fails the task before
anything is enqueued; redelivery is left to the broker.

Usage:
    from comments.tasks import process_comment

    process_comment.delay({"commentId": "0x...", "chainId": 8453})
"""

from __future__ import annotations

import logging

from celery import shared_task

from comments.services import CommentNotificationService
from comments.types import CommentJob

logger = logging.getLogger(__name__)


@shared_task(name="comments.process_comment")
def process_comment(job: dict) -> dict:
    """
    Enrich a comment-activity job.

    Args:
        job: CommentJob wire dict

    Returns:
        Dict with the comment id and the number of notification jobs enqueued
    """
    comment_job = CommentJob.from_dict(job)
    jobs = CommentNotificationService.process(comment_job)
    logger.info(
        f"Comment {comment_job.comment_id} produced {len(jobs)} notification job(s)"
    )
    return {"comment_id": comment_job.comment_id, "enqueued": len(jobs)}
