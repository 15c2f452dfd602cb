"""
LLM Utility Modules

Shared utilities used across multiple providers.

Components:
    - sse: Interpretation of server-sent event lines
"""

from .sse import extract_delta_content, is_done_line, parse_data_line

__all__ = ['extract_delta_content', 'is_done_line', 'parse_data_line']
