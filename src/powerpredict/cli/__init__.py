"""Command-line interface for powerpredict."""
