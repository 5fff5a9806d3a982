"""Command line interface; run with ``python -m scorecard_import.cli``."""
