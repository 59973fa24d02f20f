"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7

MIN_PERIOD = 1
MAX_PERIOD = 6

NOT_AVAILABLE = "N/A"
UNKNOWN_SUBJECT = "Unknown subject"

CERTIFICATE_EXTENSIONS = (".pdf", ".jpg", ".jpeg", ".png", ".doc", ".docx")
MAX_CERTIFICATE_BYTES = 2 * 1024 * 1024
INLINE_CERTIFICATE_TYPES = ("application/pdf", "image/jpeg", "image/png")
