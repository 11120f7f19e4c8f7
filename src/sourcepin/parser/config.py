from typing import Dict

# Mapping of file extensions to the tree-sitter grammar used to parse them
SUPPORTED_LANGUAGES: Dict[str, str] = {
    ".tsx": "tsx",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".jsx": "javascript",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}

# Markup-bearing grammars accept JSX; unknown extensions get the widest one
DEFAULT_LANGUAGE = "tsx"

# tree-sitter node types that make up the markup layer
ELEMENT_TYPES = ("jsx_element", "jsx_self_closing_element")
FRAGMENT_TYPES = ("jsx_fragment",)
OPENING_TYPES = ("jsx_opening_element", "jsx_self_closing_element")
EXPRESSION_CHILD_TYPES = ("jsx_expression",)
# Children of an element that are not literal text
NON_TEXT_CHILD_TYPES = ELEMENT_TYPES + FRAGMENT_TYPES + EXPRESSION_CHILD_TYPES


def language_for_filename(filename: str) -> str:
    """Pick the grammar for a filename, falling back to TSX."""
    dot = filename.rfind(".")
    if dot == -1:
        return DEFAULT_LANGUAGE
    return SUPPORTED_LANGUAGES.get(filename[dot:].lower(), DEFAULT_LANGUAGE)
