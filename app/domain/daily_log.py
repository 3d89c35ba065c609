"""Daily log domain rules"""

MOOD_HAPPY = "😊"
MOOD_NEUTRAL = "😐"
MOOD_SAD = "😔"

MOODS = [MOOD_HAPPY, MOOD_NEUTRAL, MOOD_SAD]

# Everything except the upsert key (account_id, date)
DAILY_LOG_FIELDS = (
    "journal_entry", "mood", "water_glasses", "exercised", "sleep_hours", "day_complete",
)

# Applied only when the record is first created
DAILY_LOG_DEFAULTS = {
    "water_glasses": 0,
    "exercised": False,
    "day_complete": False,
}


def is_valid_mood(mood: str | None) -> bool:
    return mood is None or mood in MOODS
