"""
Constants for the live match clock application.

This module contains the match phases and fixed values used by the clock
derivation rules and the live notification layer.
"""

# Match phases
STATUS_SCHEDULED = "scheduled"
STATUS_LIVE = "live"
STATUS_HALFTIME = "halftime"
STATUS_EXTRA_TIME = "extra_time"
STATUS_EXTRA_TIME_HALFTIME = "extra_time_halftime"
STATUS_PENALTIES = "penalties"
STATUS_FINISHED = "finished"

# Phases whose displayed minute advances with wall-clock time
TICKING_STATUSES = (STATUS_LIVE, STATUS_EXTRA_TIME)
# Phases that show a fixed value but still belong on a live board
PAUSED_STATUSES = (STATUS_HALFTIME, STATUS_EXTRA_TIME_HALFTIME, STATUS_PENALTIES)
ACTIVE_STATUSES = TICKING_STATUSES + PAUSED_STATUSES
# The notification timer never ticks in these
NON_TICKING_NOTIFICATION_STATUSES = PAUSED_STATUSES + (STATUS_FINISHED,)

# Minute anchors
FIRST_HALF_MINUTES = 45
EXTRA_TIME_HALFTIME_MINUTE = 105
PENALTIES_MINUTE = 120
FULL_TIME_MINUTE = 90
EXTRA_TIME_START_MINUTE = 91

# Fixed labels
LABEL_HALFTIME = "HT"
LABEL_PENALTIES = "PEN"
LABEL_FULL_TIME = "FT"

# Tick periods (seconds)
MINUTE_TICK_SECONDS = 30
SECOND_TICK_SECONDS = 1
COUNTDOWN_TICK_SECONDS = 60
LIVE_NOTIFICATION_TICK_SECONDS = 30

# Countdown window
COUNTDOWN_WINDOW_SECONDS = 24 * 60 * 60

# Inbound payload types
TYPE_LIVE_UPDATE = "live_update"
TYPE_GOAL = "goal"
TYPE_RED_CARD = "red_card"
TYPE_PENALTY = "penalty"
TYPE_MATCH_START = "match_start"
TYPE_START_HALF = "start_half"
TYPE_END_HALF = "end_half"
TYPE_HALFTIME = "halftime"
MATCH_END_TYPES = ("match_end", "end_match")

# Notification identity
LIVE_NOTIFICATION_PREFIX = "live-"
DATA_TYPE_LIVE_MATCH = "live_match"
DATA_TYPE_MATCH_RESULT = "match_result"

# Channels (Android-style backends)
LIVE_CHANNEL_ID = "live-match-v3"
EVENT_CHANNEL_ID = "match-events-v3"
LIVE_CHANNEL_NAME = "Live matches"
EVENT_CHANNEL_NAME = "Match events"
IMPORTANCE_DEFAULT = "default"
IMPORTANCE_HIGH = "high"

LIVE_COLOR = "#10B981"
RESULT_COLOR = "#8B5CF6"
