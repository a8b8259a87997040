"""Document store collection names (schema-in-code).

Firestore has no DDL or migrations. Collections are created when the
first document is written, so these constants are the single source of
truth for the "schema".
"""

COLLECTION_USERS = "users"
COLLECTION_TEAMS = "teams"
COLLECTION_MEETINGS = "meetings"
