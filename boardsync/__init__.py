"""boardsync: keep markdown board documents in step with their layouts."""

__version__ = "0.1.0"
