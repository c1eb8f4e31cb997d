"""HTTP transport for the MCP endpoint."""
