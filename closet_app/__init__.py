"""Closet app wiring: configuration, logging and the app shell."""
