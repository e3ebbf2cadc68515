"""
agent - Conversational agent orchestration layer.

Contains the conversation, model gateway, tools, prompt, and the executor
that runs the one-hop LLM + tool loop.
Depends on domain/ and application/. Never imports from adapters/.
"""
