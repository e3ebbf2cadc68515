"""
domain - Entities, value objects, ports and the exception hierarchy.

Pure Python plus pydantic. Never imports from infrastructure/, agent/ or adapters/.
"""
