"""
Generic utility functions shared across modules.

Includes the percentage arithmetic used by strategies and the evaluator.
"""
