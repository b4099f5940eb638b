"""
Test suite for the dynamic fee hook

Contains:
- tests/unit/          : Unit tests for individual modules
"""
