"""
Fixed physiological and grading constants shared by the analytics modules.
"""

# Heart rate defaults and plausibility window (bpm)
DEFAULT_MAX_HEART_RATE = 190
DEFAULT_RESTING_HEART_RATE = 60
MIN_PLAUSIBLE_MAX_HR = 120
MAX_PLAUSIBLE_MAX_HR = 230
MIN_PLAUSIBLE_RESTING_HR = 30
MAX_PLAUSIBLE_RESTING_HR = 100
LOW_INTENSITY_HR_FRACTION = 0.75
MIN_LOW_INTENSITY_SESSIONS = 3
RESTING_HR_PERCENTILE = 5
LTHR_FRACTION_OF_MAX = 0.85

# Power / pace thresholds
THRESHOLD_MIN_DURATION_SECONDS = 20 * 60
THRESHOLD_PERCENTILE = 90
THRESHOLD_DURATION_SECONDS = 3600

# TRIMP (Banister, single sex-neutral coefficients)
TRIMP_WEIGHT = 0.64
TRIMP_EXPONENT = 1.92

# Duration fallback load per hour before the sport multiplier
DURATION_LOAD_PER_HOUR = 50.0

SPORT_MULTIPLIERS = {
    "Run": 1.0,
    "Ride": 0.85,
    "VirtualRide": 0.85,
    "Swim": 1.1,
    "Hike": 0.7,
    "Walk": 0.5,
    "Workout": 0.9,
    "WeightTraining": 0.8,
    "Yoga": 0.6,
    "CrossCountrySkiing": 1.0,
    "AlpineSki": 0.8,
    "Snowboard": 0.8,
    "IceSkate": 0.9,
    "InlineSkate": 0.9,
    "Rowing": 1.0,
    "Kayaking": 0.9,
    "Canoeing": 0.9,
    "StandUpPaddling": 0.8,
    "Surfing": 0.7,
    "Kitesurf": 0.8,
    "Windsurf": 0.8,
    "Soccer": 1.0,
    "Tennis": 0.9,
    "Basketball": 0.95,
    "Badminton": 0.9,
    "Golf": 0.4,
    "RockClimbing": 0.9,
}
DEFAULT_SPORT_MULTIPLIER = 0.8

# Training load time series
MIN_LOAD_SESSION_SECONDS = 300
CTL_TIME_CONSTANT = 42
ATL_TIME_CONSTANT = 7
RAMP_WINDOW_DAYS = 7

# Data quality grading: (max HR share in percent, max HR session count)
# A grade applies while share < limit OR count < limit.
QUALITY_POOR_SHARE = 20.0
QUALITY_POOR_COUNT = 5
QUALITY_FAIR_SHARE = 50.0
QUALITY_FAIR_COUNT = 10
QUALITY_GOOD_SHARE = 80.0
QUALITY_GOOD_COUNT = 20

# Confidence grading on total session count
CONFIDENCE_HIGH_SESSIONS = 20
CONFIDENCE_MEDIUM_SESSIONS = 10

# Zone analysis
HR_PERCENTILES = (50, 75, 85, 90, 95, 99)
MIN_SPORT_SESSIONS = 3
MORE_DATA_HR_SESSIONS = 10
LOW_OBSERVED_MAX_HR = 160
CUSTOM_MAX_HR_RANGE = (100, 250)

# Goal insights
NEUTRAL_SUCCESS_PROBABILITY = 75
ONGOING_GOAL_WEEKS = 52
TREND_WINDOW = 3
TREND_THRESHOLD_PERCENT = 10.0
LOW_PROGRESS_PERCENT = 25.0
AHEAD_OF_PACE_FACTOR = 1.5
MAX_RECOMMENDATIONS = 3
SUCCESS_PROBABILITY_TIERS = (
    (1.2, 95),
    (1.0, 85),
    (0.8, 70),
    (0.6, 50),
)
SUCCESS_PROBABILITY_FLOOR = 25

# Dashboard goal recommendations
RECENT_SESSION_WINDOW = 20
DISTANCE_SUGGESTION_FACTOR = 1.2
MIN_FREQUENCY_SUGGESTION = 3
NEAR_COMPLETION_PERCENT = 80.0
