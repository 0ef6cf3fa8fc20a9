"""
Test suite for the stop-chaser order sizing engine

Contains:
- tests/unit/          : Unit tests for individual modules
"""
