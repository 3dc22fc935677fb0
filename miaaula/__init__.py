"""
miaaula - attempt scoring and mastery/domain delta engine.

Builds per-attempt diagnostic reports, aggregates session progress, and
keeps a bounded report history plus an audit log of broken questions.
"""

__version__ = "1.0.0"
