"""Entry point for running pg_column_meta as a module."""

from pg_column_meta.server import cli_entry

if __name__ == "__main__":
    cli_entry()
