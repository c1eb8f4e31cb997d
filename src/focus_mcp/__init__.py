"""Activity ledger, actor attribution and MCP bridge for the Focus task manager."""

__version__ = "0.4.0"
