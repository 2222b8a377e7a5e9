"""Tests for built-in node types."""
