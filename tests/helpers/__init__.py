"""Test doubles shared across the nsl10n test suite."""
