"""CLI subcommands for abac-core."""
