"""Ticketing services: registration, payments, check-in and attendance."""
