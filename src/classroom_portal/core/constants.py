"""Constants and defaults.

Note: Keep collection names here so repositories never spell them inline.
"""

USERS = "users"
CREDENTIALS = "credentials"
ATTENDEES = "attendees"
DELETED_ATTENDEES = "deleted_attendees"
ATTENDANCE = "attendance"
ASSIGNMENTS = "assignments"
SUBMISSIONS = "submissions"

DEFAULT_PENDING_LIMIT = 3
MIN_PASSWORD_LENGTH = 6
