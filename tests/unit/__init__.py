"""Unit tests for the LATOKEN connector."""
