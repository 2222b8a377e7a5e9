"""Test suite for edgeflow."""
