"""Typed return models for the service layer."""
