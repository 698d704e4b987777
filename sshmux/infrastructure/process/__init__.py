"""
Subprocess execution
"""
from .runner import ProcessCancelled, ProcessResult, run_process

__all__ = ["ProcessCancelled", "ProcessResult", "run_process"]
