"""Output formatting for the ``fieldguard`` CLI."""
