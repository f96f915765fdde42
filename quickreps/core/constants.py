"""Application constants."""

# Server-side bounds for a single set (direct submission)
MIN_SET_REPS = -1000
MAX_SET_REPS = 1000
MAX_NOTE_LENGTH = 500

# Set listing
DEFAULT_SETS_LIMIT = 50
MAX_SETS_LIMIT = 500

# Exercise definitions
MIN_GOAL = 1
MAX_GOAL = 10000
EXERCISE_TYPE_PATTERN = r"^[a-zA-Zа-яА-ЯёЁ0-9\s]+$"
DEFAULT_EXERCISE_TYPES = ("pullups", "pushups", "squats")
DEFAULT_EXERCISE_GOAL = 100

# Quick-entry buffer (client-side usability bounds, tighter than MAX_SET_REPS)
BUFFER_WINDOW_SECONDS = 5.0
BUFFER_MIN_VALUE = 0
BUFFER_MAX_VALUE = 100
COUNTDOWN_TICK_SECONDS = 1.0

# Recent history feeding suggested increments
HISTORY_LIMIT = 20
FALLBACK_INCREMENTS = (3, 5, 8)
INCREMENT_SPREAD = 2
MIN_INCREMENT = 1
