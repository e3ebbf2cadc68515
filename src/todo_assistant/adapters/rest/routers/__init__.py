"""REST routers: /todos and /chat."""
