"""
Strategy interfaces and implementations for signal generation.

Defines the strategy protocol and concrete strategies that emit one trade
signal per bar of a price series.
"""
