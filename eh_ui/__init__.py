"""Command-line front end for exec-harness."""
