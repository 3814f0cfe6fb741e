"""Command-line scripts for the Question Bank Curator."""
