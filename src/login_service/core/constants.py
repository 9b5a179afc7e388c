"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# Hash lengths
SHA256_HEX_LENGTH = 64

# String field lengths
MAX_USERNAME_LENGTH = 255
MAX_EMAIL_LENGTH = 255

# Characters rejected in usernames
FORBIDDEN_USERNAME_CHARS = ("<", ">", "/")

# Password requirements
MIN_PASSWORD_LENGTH = 10
MAX_PASSWORD_LENGTH = 256
BCRYPT_ROUNDS = 12
MIN_BCRYPT_ROUNDS = 4
MAX_BCRYPT_ROUNDS = 16

# Pagination defaults
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Token settings
TOKEN_ALGORITHM = "RS256"
RSA_KEY_SIZE = 2048
REFRESH_TOKEN_BYTES = 32
TOKEN_JTI_LENGTH = 32
ACCESS_TOKEN_TYPE = "access"
PASSWORD_RESET_TOKEN_TYPE = "password_reset"
BEARER_SCHEME = "Bearer"
