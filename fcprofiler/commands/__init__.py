"""CLI subcommands for fcprofiler."""
