"""
Tool declarations offered to the assistant model.

Schemas are plain JSON schema; each provider converts them to its own dialect.
"""

from novtl.core.llm import ToolSpec

ADD_TO_GLOSSARY = "add_to_glossary"
REMOVE_FROM_GLOSSARY = "remove_from_glossary"

ADD_TO_GLOSSARY_TOOL = ToolSpec(
    name=ADD_TO_GLOSSARY,
    description="Save new terms to the glossary.",
    parameters={
        "type": "object",
        "properties": {
            "items": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "original": {"type": "string"},
                        "translated": {"type": "string"},
                    },
                    "required": ["original", "translated"],
                },
            },
        },
        "required": ["items"],
    },
)

REMOVE_FROM_GLOSSARY_TOOL = ToolSpec(
    name=REMOVE_FROM_GLOSSARY,
    description="Remove terms from the glossary by their original word.",
    parameters={
        "type": "object",
        "properties": {
            "originals": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Original words to remove from the glossary.",
            },
        },
        "required": ["originals"],
    },
)

ASSISTANT_TOOLS = [ADD_TO_GLOSSARY_TOOL, REMOVE_FROM_GLOSSARY_TOOL]
