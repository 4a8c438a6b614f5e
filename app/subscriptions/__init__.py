"""
Post subscriptions.

An app account subscribes to an author's posts. Subscriptions are stored
per (account, author) and managed through /api/v1/subscriptions/posts/.
"""
