# backend/app/routes/v1/__init__.py
"""
API routes

Endpoints mounted under /api.
"""

from . import admin, auth, bookings, coaches, health, messages, reviews, students

__all__ = [
    "admin",
    "auth",
    "bookings",
    "coaches",
    "health",
    "messages",
    "reviews",
    "students",
]
