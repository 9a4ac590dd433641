"""
Concurrent scheduling of per-symbol backtests.

Runs one strategy over many symbols with a fixed pool of worker threads
draining a shared job queue.
"""
