"""idxwatch - live IDX stock quotes and charts in the terminal."""

__version__ = "1.0.0"
