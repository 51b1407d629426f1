from enum import Enum


class BookingStep(str, Enum):
    DATE = "date"
    TIME = "time"
    DETAILS = "details"
    SUCCESS = "success"
