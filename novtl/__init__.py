"""
NovTL: novel translation with an enforced project glossary and a writing
assistant that manages the glossary through tool calls.
"""

__version__ = "1.0.0"
