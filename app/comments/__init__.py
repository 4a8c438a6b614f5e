"""
Comments app: comment enrichment.

Loads comments from the content indexer (with retries and caching) and
turns comment activity into notification jobs for the parent author and
every mentioned account.
"""
