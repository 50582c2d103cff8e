"""Core constants: storage key names and cache key prefixes.

Single source of truth for the storage layout shared by the cache store,
the pending action queue and the token provider.
"""

# Storage keys (values are JSON documents in the key-value storage)
CACHE_STORAGE_PREFIX = "cache_"
PENDING_ACTIONS_KEY = "pendingOfflineActions"
PENDING_ATTEMPTS_KEY = "pendingOfflineActions_attempts"
FAILED_ACTIONS_KEY = "failedOfflineActions"
ACCESS_TOKEN_KEY = "accessToken"

# Cache key prefixes for backend resources (used with _id)
CACHE_PREFIX_COURSES = "courses"
CACHE_PREFIX_COURSE = "course"
CACHE_PREFIX_ASSIGNMENTS = "assignments"
CACHE_PREFIX_ASSIGNMENT = "assignment"
CACHE_PREFIX_MESSAGES = "messages"
CACHE_PREFIX_ANNOUNCEMENTS = "announcements"
CACHE_PREFIX_USERS = "users"
CACHE_PREFIX_USER = "user"
CACHE_PREFIX_EVENTS = "events"

# Delimiter for composite cache keys
CACHE_KEY_SEP = "_"

# Action id prefix and random suffix length
ACTION_ID_PREFIX = "action"
ACTION_ID_SUFFIX_LENGTH = 9

# User-facing messages
MSG_CACHE_OFFLINE = "Data loaded from cache (offline mode)"
MSG_CACHE_NETWORK_ERROR = "Data loaded from cache due to network error"
MSG_ACTION_QUEUED = "Action queued for sync when online"
MSG_OFFLINE = "You are currently offline. Please check your internet connection."
