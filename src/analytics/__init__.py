"""
Numeric passes over price series used by strategies.

Currently holds the trailing-window max/min computation that breakout
strategies use to measure how far price has moved from its recent range.
"""
