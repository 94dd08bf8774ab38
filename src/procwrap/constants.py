"""Constants for procwrap."""

# Default directories
DEFAULT_LOG_DIR = "/var/log"
DEFAULT_TEMP_DIR = "/tmp"

# Exit codes
EXIT_FAILURE = 1
VERSION_EXIT_CODE = 99

# Supervision timing (seconds)
POLL_INTERVAL = 1
SETTLE_DELAY = 1  # Pause after clearing a lock to damp rapid re-invocation
REAP_TIMEOUT = 5  # Wait for a terminated child before giving up on it
PS_TIMEOUT = 10

# Lock files are world-readable, owner-writable
LOCK_FILE_MODE = 0o644

# Replacement for characters not allowed in task names
NAME_FILLER = "_"
