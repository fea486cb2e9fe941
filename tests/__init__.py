"""
Test suite for the territory engine

Contains:
- tests/unit/          : Unit tests for individual modules and claim scenarios
"""
