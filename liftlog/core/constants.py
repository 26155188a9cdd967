"""Application constants."""

from liftlog.core.enums import ChartPeriod

# Unit conversion factors (canonical storage: kg, km, seconds)
KG_TO_LBS = 2.2046226218
LBS_TO_KG = 0.45359237
KM_TO_MILES = 0.621371
MILES_TO_KM = 1.609344

# Display rounding for pounds (standard plate granularity)
LBS_DISPLAY_STEP = 0.5

# Default +/- increment for weight inputs
DEFAULT_KG_INCREMENT = 5.0
DEFAULT_LBS_INCREMENT = 5.0

# Agenda pagination
DEFAULT_DAYS_TO_SHOW = 30
LOAD_MORE_DAYS = 30

# Calendar marks cover the visible month plus this many months on each side
CALENDAR_BUFFER_MONTHS = 1
MARKED_DOT_COLOR = "#10b981"

# Number of days each chart period spans, ending today
PERIOD_DAYS: dict[ChartPeriod, int] = {
    ChartPeriod.WEEK: 7,
    ChartPeriod.MONTH: 30,
    ChartPeriod.QUARTER: 90,
    ChartPeriod.HALF_YEAR: 180,
    ChartPeriod.YEAR: 365,
    ChartPeriod.ALL_TIME: 365 * 10,
}

CHART_COLORS = (
    "#FF6B6B",  # Red
    "#4ECDC4",  # Teal
    "#45B7D1",  # Blue
    "#96CEB4",  # Green
    "#FFEAA7",  # Yellow
    "#DDA0DD",  # Plum
    "#98D8C8",  # Mint
    "#F7DC6F",  # Gold
)

# Preference store keys
CALENDAR_VIEW_KEY = "@calendar_view_preference"
SHOW_EMPTY_DAYS_KEY = "@agenda_show_empty_days"
CHART_PERIOD_KEY = "@chart_period_preference"
CHART_EXERCISES_KEY = "@chart_exercises_preference"
WEIGHT_UNIT_KEY = "@weight_unit_preference"
DISTANCE_UNIT_KEY = "@distance_unit_preference"
WEIGHT_INCREMENT_KEY = "@weight_increment_preference"
THEME_KEY = "@app_theme_preference"
USED_EXERCISE_FILTER_KEY = "@select_exercise_show_only_used"
