"""Application-wide constants for the BookAPro platform."""

from __future__ import annotations

import os

# Lesson durations offered to students (minutes)
ALLOWED_LESSON_DURATIONS = (30, 60, 90, 120)

# Lesson types offered by coaches
LESSON_TYPES = ("individual", "group", "playing")

# Daily candidate slots shown to students when picking a lesson time.
# Each slot is one hour long.
DEFAULT_DAILY_SLOTS = (
    "9:00 AM",
    "10:00 AM",
    "11:00 AM",
    "1:00 PM",
    "2:00 PM",
    "3:00 PM",
    "4:00 PM",
)
SLOT_LENGTH_MINUTES = 60

# Text constraints
MAX_MESSAGE_LENGTH = 2000
MAX_BIO_LENGTH = 2000
MAX_REVIEW_LENGTH = 2000
MIN_RATING = 1
MAX_RATING = 5

# Inbox preview
LAST_MESSAGE_PREVIEW_LENGTH = 100

# Query limits
DEFAULT_QUERY_LIMIT = 100
MAX_QUERY_LIMIT = 500

# Frontend URLs
DEFAULT_DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def _split_env(name: str) -> list[str]:
    value = os.getenv(name, "")
    return [origin.strip() for origin in value.split(",") if origin.strip()]


ALLOWED_ORIGINS = _split_env("ALLOWED_ORIGINS") or _split_env("FRONTEND_URL") or DEFAULT_DEV_ORIGINS

# Error messages
ERROR_COACH_NOT_FOUND = "Coach not found"
ERROR_STUDENT_NOT_FOUND = "Student not found"
ERROR_BOOKING_NOT_FOUND = "Booking not found"
ERROR_CONVERSATION_NOT_FOUND = "Conversation not found"
ERROR_USER_NOT_FOUND = "User not found"
ERROR_ADMIN_ONLY = "Admin access required"

# Brand Configuration
BRAND_NAME = "BookAPro"
BRAND_TAGLINE = "Book a golf pro near you"

# API Documentation
API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = f"Backend API for {BRAND_NAME} - A marketplace connecting golf students with coaches"
API_VERSION = "1.0.0"
