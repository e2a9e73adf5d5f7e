"""Shared constants for uploader modules.

The hashing granularity is fixed by the archive protocol; only the part
size is configurable.
"""

# =============================================================================
# Tree Hash
# =============================================================================

MEGABYTE = 1024 * 1024

# Sub-chunk size for leaf digests, independent of the part size
HASH_CHUNK_SIZE = MEGABYTE

# SHA-256 output length
DIGEST_SIZE = 32

# =============================================================================
# Multipart Upload Defaults
# =============================================================================

# Part size in MiB when neither the CLI nor the profile sets one
DEFAULT_PART_SIZE_MB = 1

# Per-request timeout for remote calls (seconds)
DEFAULT_TIMEOUT = 300

# API version header value
GLACIER_API_VERSION = "2012-06-01"

# "-" addresses the account that owns the signing credentials
DEFAULT_ACCOUNT_ID = "-"

# Read size used when hashing a whole stream locally
DEFAULT_READ_SIZE = 8 * MEGABYTE
