"""Machine Provisioner — idempotent winget-driven workstation setup."""

__version__ = "0.1.0"
