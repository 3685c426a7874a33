"""Pytest configuration and shared fixtures."""

from hypothesis import settings

# Create a profile named "no_deadline" with deadline disabled.
#
# Key generation and ECDH timing varies too much between machines for
# hypothesis' default per-example deadline.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")
