from typing import Dict

from tree_sitter import Language, Parser
import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript

from sourcepin.exceptions import ConfigError
from sourcepin.logging_config import logger

_LANGUAGE_LOADERS = {
    "tsx": tstypescript.language_tsx,
    "typescript": tstypescript.language_typescript,
    "javascript": tsjavascript.language,
}

# Global caches for loaded languages and parsers to avoid repeated loading
_language_cache: Dict[str, Language] = {}
_parser_cache: Dict[str, Parser] = {}


def get_language(language_name: str) -> Language:
    """
    Loads a tree-sitter language from its grammar package.

    Caches the loaded language object for efficiency.
    """
    if language_name in _language_cache:
        return _language_cache[language_name]

    loader = _LANGUAGE_LOADERS.get(language_name)
    if loader is None:
        raise ConfigError(f"No tree-sitter grammar registered for '{language_name}'")

    lang = Language(loader())
    _language_cache[language_name] = lang
    logger.debug(f"Successfully loaded language '{language_name}'")
    return lang


def get_parser(language_name: str) -> Parser:
    """Get a cached parser for a language."""
    if language_name not in _parser_cache:
        parser = Parser()
        parser.language = get_language(language_name)
        _parser_cache[language_name] = parser
    return _parser_cache[language_name]
