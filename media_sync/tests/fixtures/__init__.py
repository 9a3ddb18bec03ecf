"""Shared fixtures for the media sync tests."""
