"""MCP tools shipped with godocs-mcp"""
