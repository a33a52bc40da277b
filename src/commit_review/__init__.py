"""AI-gated commit review: a prepare-commit-msg hook backed by a chat model."""

__version__ = "0.3.0"
