"""
Core modules: provider layer, glossary, translation and assistant.

Note: submodules are not re-exported here to keep the import order simple.
Import them directly, e.g. `from novtl.core.translator import translate_text_stream`.
"""
