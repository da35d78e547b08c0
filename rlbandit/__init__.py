"""Multi-armed bandit scoring for A/B experiments."""

__version__ = "0.1.0"
