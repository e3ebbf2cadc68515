"""
application - Session context and per-session agent lifecycle.

Depends on domain/ and agent/. Never imports from adapters/.
"""
