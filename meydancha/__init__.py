"""Meydancha reservation service."""
