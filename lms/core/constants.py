"""Core constants: cache key namespaces, storage folders and shared literal values.

Single source of truth for cache key structure. Used by
lms.application.services.cache_keys and the invalidation table in
lms.application.services.cache_policy.
"""

# Cache key namespaces (<namespace>:<discriminator>)
CACHE_PREFIX_USER = "user"
CACHE_PREFIX_COURSE = "course"
CACHE_PREFIX_ORDER = "order"
CACHE_PREFIX_NOTIFICATION = "notification"
CACHE_PREFIX_ANALYTICS = "analytics"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Discriminators
CACHE_ALL = "all"
CACHE_ADMIN_PREFIX = "admin-"
CACHE_CONTENT_SUFFIX = "content"

# Image storage folders
FOLDER_AVATAR = "lms/avatar"
FOLDER_COURSE_THUMBNAIL = "lms/course-thumbnail"
FOLDER_BANNER = "lms/banner"

# Auth cookies
ACCESS_TOKEN_COOKIE = "access_token"
REFRESH_TOKEN_COOKIE = "refresh_token"

# Activation code length (digits)
ACTIVATION_CODE_LENGTH = 4

# Per-user profile and admin user-list entries expire after 7 days
USER_CACHE_TTL_SECONDS = 7 * 24 * 60 * 60

# Signed token types (the "typ" claim)
TOKEN_ACCESS = "access"
TOKEN_REFRESH = "refresh"
TOKEN_ACTIVATION = "activation"
TOKEN_OAUTH_STATE = "oauth_state"
