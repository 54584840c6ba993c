"""
mcp-seraphim - phone brand/model catalog search with a tiered cache
"""
__version__ = "0.1.0"
