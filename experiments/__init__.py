"""Convenience exports for the experiments package."""

from .experiment import Experiment, RunResult, SearchConfiguration

__all__ = ["Experiment", "RunResult", "SearchConfiguration"]
