"""
adapters.rest - FastAPI transport for the agent loop and the task list.
"""
