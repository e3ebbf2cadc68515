"""
agent.tools - The four task-list tools and their registry.
"""
