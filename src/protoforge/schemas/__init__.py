"""Pydantic schemas for prototypes and generation results."""
