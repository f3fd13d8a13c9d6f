"""total-recall: discover and summarise Claude Code session logs."""

__version__ = "0.1.0"
