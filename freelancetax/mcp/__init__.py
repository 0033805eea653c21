"""MCP server exposing the ledger and tax summary."""
