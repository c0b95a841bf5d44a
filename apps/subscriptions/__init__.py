"""Subscriptions app: FREE, TRIAL and PREMIUM records and their lifecycle."""
