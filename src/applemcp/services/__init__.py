"""Service layer — capability gate, aggregation, per-tool handlers, routing.

Services may import from domain and infrastructure layers.
They must never import from commands, output, or mcp.
"""
