"""Command-line interface for dataobject-seed."""
