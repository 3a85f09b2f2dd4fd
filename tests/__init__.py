"""Test suite for the Barista DLP client core."""
