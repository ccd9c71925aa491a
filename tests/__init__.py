"""
Test suite for xmath

Contains:
- tests/unit/          : Unit tests for individual modules
"""
