"""Pipeline execution modules for the match engine."""

from .runner import BatchWorker, BatchResult, run_recompute_batch

__all__ = ['BatchWorker', 'BatchResult', 'run_recompute_batch']
