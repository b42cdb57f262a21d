"""Command line interface for Mailbox Kit."""
