MINUTES_PER_DAY = 1440
CLOCK_FORMAT = "%H:%M"
DATE_FORMAT = "%Y-%m-%d"

# Sunday-first, matching day_of_week (0 = Sunday).
DAY_LABELS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
