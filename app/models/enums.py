from enum import Enum


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class Sentiment(str, Enum):
    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"


class Severity(str, Enum):
    MODERATE = "Moderate"
    HIGH = "High"
    URGENT = "Urgent"


class ComplaintStatus(str, Enum):
    OPEN = "open"
    RESOLVED = "resolved"


# Transient classifier outcome; never persisted on a Comment
UNKNOWN_SENTIMENT = "Unknown"
