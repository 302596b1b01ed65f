"""Shared constants for kvcache-storage."""

from __future__ import annotations

# Dependency descriptor keys accepted by CacheStorage.write
EXPIRATION = "expiration"
SLIDING = "sliding"
CALLBACKS = "callbacks"
TAGS = "tags"
PRIORITY = "priority"
ITEMS = "items"

# Clean condition keys; anything other than ALL is interpreted by the journal
ALL = "all"

# Envelope fields stored alongside the payload
META_DATA = "data"
META_DELTA = "delta"
META_CALLBACKS = "callbacks"

# Transport defaults
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6379
DEFAULT_DB = 0
DEFAULT_PREFIX = ""

# No expiry when passed as the relative TTL of a set
NO_EXPIRATION = 0
