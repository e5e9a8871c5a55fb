"""Test suite for zonedocs."""
