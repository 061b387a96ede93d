"""Adapters – integrations with host frameworks."""
