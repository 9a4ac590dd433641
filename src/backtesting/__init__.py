"""
Backtest runner, trade evaluator, and reporting utilities.

Turns strategy signals into realized-trade statistics per symbol and writes
human-readable summaries through a serialized output sink.
"""
