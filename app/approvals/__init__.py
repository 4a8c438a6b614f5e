"""
Approvals app: the local mirror of author -> app delegations.

An author approves an app account to post on their behalf on a chain.
Notifications addressed to an author are delivered to the app accounts
holding an active approval for them.

Usage:
    from approvals.services import ApprovalService

    result = ApprovalService.sync_approvals_for_app("0xapp...", chain_id=8453)
    apps = ApprovalService.resolve_apps_for_author("0xauthor...", chain_id=8453)
"""
