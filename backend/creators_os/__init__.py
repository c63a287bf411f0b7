"""Creators OS insight engine and API."""
