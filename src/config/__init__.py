"""
Configuration loading and validation for run settings and strategy parameters.

Provides strongly typed settings objects loaded from environment variables,
with upfront validation.
"""
