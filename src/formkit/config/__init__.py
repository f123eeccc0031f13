"""Configuration layer — option models, runtime settings, logging setup."""
