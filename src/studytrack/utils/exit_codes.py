"""Exit codes for the StudyTrack CLI.

Semantic codes let scripts tell a bad invocation from a missing setting.
"""

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Resource not found (unknown config key, etc.)
ERROR_NOT_FOUND = 5
