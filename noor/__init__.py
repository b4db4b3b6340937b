"""
Noor streak core.

Daily challenge completion tracking with a consecutive-day streak,
per-habit completion counters and durable local key-value storage.
"""

__version__ = "0.1.0"
