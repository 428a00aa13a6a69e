"""Core interfaces.

Why:
- Defines the contracts (Protocol) that concrete dnspython adapters implement.
- Lets the pipeline be exercised with in-memory fakes.
"""
