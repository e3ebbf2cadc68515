"""
infrastructure.persistence - aiosqlite implementation of the task store.
"""
