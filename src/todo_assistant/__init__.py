"""
todo_assistant - Conversational to-do list assistant.

An LLM interprets free-form requests as one of four task-list tools; the
agent loop executes the tool against SQLite and relays the observation back
to the model for a natural-language reply.
"""

__version__ = "0.1.0"
