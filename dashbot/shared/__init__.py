"""Shared infrastructure for the bot and the dashboard API."""
