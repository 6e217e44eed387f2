"""Dense LDLT factorization with diagonal pivoting, solves, updates and section timers."""

__version__ = "0.1.0"

__all__ = ["views", "kernels", "timing", "factorize", "solve", "update", "ldlt"]