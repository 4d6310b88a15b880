"""MCP server package for filemaker-mcp-server.

The MCP server is meant for LLM agents to call FileMaker tools:
- get-token
- abandon-token
- get-layout-metadata
- find-records

Transport:
- stdio (implemented)
"""
