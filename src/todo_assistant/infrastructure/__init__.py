"""
infrastructure - Concrete implementations of domain ports.

Configuration, LLM construction and retry, aiosqlite persistence.
"""
