"""
Shared infrastructure for KVS nodes: configuration helpers, logging,
metrics, HTTP communication and data models.
"""
