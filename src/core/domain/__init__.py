"""Domain types for ptrsweep.

Why here:
- Pure data structures (Pydantic v2, enums, exceptions) shared by every layer.
- The domain knows nothing about sockets, dnspython or the CLI.
"""
