"""Venue portal backend: events, weekly recurrence and venue analytics."""
