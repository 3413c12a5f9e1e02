"""Non-repeating random EMA draws for study participants."""

__version__ = "0.1.0"
