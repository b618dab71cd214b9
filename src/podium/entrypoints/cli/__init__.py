"""The `podium` command-line interface."""
