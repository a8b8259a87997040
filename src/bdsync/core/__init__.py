"""Core domain - protocols, domain types, session lifecycle and guards.

The core never imports adapters; it depends on the Protocols in
``bdsync.core.interfaces`` only.
"""
