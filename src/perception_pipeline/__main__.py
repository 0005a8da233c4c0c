"""
Entry point for running the perception pipeline as a module.

Usage:
    python -m perception_pipeline [--config PATH]
"""

from .cli import main

if __name__ == "__main__":
    main()
