"""Pytest configuration and shared fixtures."""

from hypothesis import settings

# Create a profile named "no_deadline" with deadline disabled.
#
# Dilithium signing runs in pure Python and easily exceeds the default deadline.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")
