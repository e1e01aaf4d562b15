"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# String field lengths
MAX_EMAIL_LENGTH = 255
MIN_PERSON_NAME_LENGTH = 2
MAX_PERSON_NAME_LENGTH = 50
MAX_PHONE_LENGTH = 30
MAX_DEPARTMENT_LENGTH = 100
MAX_EMPLOYEE_ID_LENGTH = 20
MIN_ROLE_NAME_LENGTH = 2
MAX_ROLE_NAME_LENGTH = 50
MIN_PERMISSION_NAME_LENGTH = 3
MAX_PERMISSION_NAME_LENGTH = 50
MAX_PERMISSION_DESCRIPTION_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 255
MAX_ENUM_LENGTH = 32

# Permission names are lowercase words joined by hyphens
PERMISSION_NAME_PATTERN = r"^[a-z-]+$"

# Role privilege levels
MIN_ROLE_LEVEL = 1
MAX_ROLE_LEVEL = 100

# Label reported for the top-tier principal
SUPER_ADMIN_ROLE_LABEL = "super-admin"

# Spellings of the top-tier role that ordinary roles may never use
RESERVED_ROLE_NAMES = frozenset({"super-admin", "superadmin", "super_admin", "super admin"})

# Password requirements
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128
BCRYPT_ROUNDS = 12

# Pagination defaults
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Token settings
ACCESS_TOKEN_JTI_LENGTH = 32

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"
DEFAULT_SUPER_ADMIN_PASSWORD = "ChangeMe!SuperAdmin1"
