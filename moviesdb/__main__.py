"""Main entry point when executing moviesdb as a package.

This allows running the package using python -m moviesdb.
"""

from moviesdb.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
