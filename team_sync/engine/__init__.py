"""Deterministic engines behind the service facade.

Sub-modules:
- seeded_random – FNV-1a seeding + xorshift32 generator
- fit_scoring   – weighted fit score per activity
- selection     – shuffle-truncate selection with department coverage
- analytics     – success metrics, sentiment, trends, hero breakdown
- persona       – team persona composition
- gamification  – points / badges state machine
"""
