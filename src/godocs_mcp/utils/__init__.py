"""Utility helpers for godocs-mcp"""
