"""Enumerations for bill settings and advisory responses."""

from enum import Enum


class Season(Enum):
    """Billing season. Summer and winter carry higher rates."""

    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"


class HomeSize(Enum):
    """Relative home size, used as a load multiplier."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class EfficiencyRating(Enum):
    """Overall efficiency of the home envelope and equipment."""

    POOR = "poor"
    AVERAGE = "average"
    GOOD = "good"
    EXCELLENT = "excellent"


class ResponseSource(Enum):
    """Which branch of the advisory engine produced a response."""

    BILL = "bill"
    TOPIC = "topic"
    DEFAULT = "default"
