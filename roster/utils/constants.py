"""
Constants used across the roster validation rules.
"""

# Player rules
MAX_NAME_LENGTH = 200
MAX_PHOTO_URL_LENGTH = 500
MAX_AGE_IN_YEARS = 100
VALID_GENDER_OPTIONS = ("Male", "Female", "Non-binary", "Prefer not to say")

# Team membership rules
MAX_TEAM_NAME_LENGTH = 200
MAX_CHAMPIONSHIP_NAME_LENGTH = 200
MAX_FUTURE_YEARS_FOR_JOINED_DATE = 1

# Per-game statistic rules
MAX_MINUTES_PLAYED = 120
MIN_JERSEY_NUMBER = 1
MAX_JERSEY_NUMBER = 99

# Validation key used when an active assignment already exists
DUPLICATE_ASSIGNMENT_KEY = "DuplicateAssignment"
