"""Test helper utilities for support mailer tests."""

from .fakes import CALLER_EMAIL, VALID_TOKEN, FakeIdentityVerifier, RecordingTransport

__all__ = ["CALLER_EMAIL", "VALID_TOKEN", "FakeIdentityVerifier", "RecordingTransport"]
