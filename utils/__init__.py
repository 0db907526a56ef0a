"""Encoding helpers shared by the naming functions."""
