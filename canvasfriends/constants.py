"""Global constants for the canvasfriends application."""

# Collection names
USERS_COLLECTION = "users"
GROUPS_COLLECTION = "groups"

# Group codes
GROUP_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
GROUP_CODE_LENGTH = 6
MAX_GROUP_CODE_ATTEMPTS = 10
GROUP_NAME_MAX_LENGTH = 100

# Sanitized assignment records
DEFAULT_ASSIGNMENT_TITLE = "Untitled Assignment"
DEFAULT_COURSE_NAME = "Unknown Course"

# Canvas
CANVAS_PLANNER_PATH = "/api/v1/planner/items"
CANVAS_SELF_PATH = "/api/v1/users/self"
CANVAS_TIMEOUT = 30
CANVAS_LOOKAHEAD_DAYS = 60
