"""Identifier legalization shared by the Dart renderers."""

import re

DART_KEYWORDS = frozenset([
    'abstract', 'as', 'assert', 'async', 'await', 'break', 'case', 'catch', 'class',
    'const', 'continue', 'default', 'deferred', 'do', 'dynamic', 'else', 'enum',
    'export', 'extends', 'external', 'factory', 'false', 'final', 'finally', 'for',
    'function', 'get', 'hide', 'if', 'implements', 'import', 'in', 'interface', 'is',
    'library', 'mixin', 'new', 'null', 'on', 'operator', 'part', 'rethrow', 'return',
    'set', 'show', 'static', 'super', 'switch', 'sync', 'this', 'throw', 'true', 'try',
    'typedef', 'var', 'void', 'while', 'with', 'yield'
])

_IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')
_UNDERSCORE_LETTER_PATTERN = re.compile(r'_([A-Za-z])')


def is_dart_keyword(word: str) -> bool:
    """Checks if a word is a Dart reserved word"""
    return word in DART_KEYWORDS


def is_legal_identifier(name: str) -> bool:
    """Checks if a name is syntactically usable as an identifier (keywords not considered)"""
    return isinstance(name, str) and _IDENTIFIER_PATTERN.match(name) is not None


def to_camel_case(name: str) -> str:
    """
    Converts snake_case to camelCase.

    Each letter that directly follows an underscore is uppercased and the
    underscore is removed. All other characters are left as they are, so
    ``user_id`` becomes ``userId`` and ``line_2`` stays ``line_2``.
    """
    return _UNDERSCORE_LETTER_PATTERN.sub(lambda m: m.group(1).upper(), name)


def capitalize(name: str) -> str:
    """Uppercases the first character only."""
    return name[:1].upper() + name[1:]


def legalize(json_key: str):
    """
    Maps a raw JSON key to a Dart identifier.

    Args:
        json_key (str): The key as it appears in the JSON document.

    Returns:
        Optional[str]: The camelCase identifier, or None if the key has to be
            dropped because it is not a legal identifier or it (or its
            camelCase form) is a reserved word.
    """
    if not is_legal_identifier(json_key) or is_dart_keyword(json_key):
        return None
    identifier = to_camel_case(json_key)
    if is_dart_keyword(identifier):
        return None
    return identifier


def is_valid_class_name(name: str) -> bool:
    """Checks if a name can be used as the generated class name"""
    return is_legal_identifier(name) and not is_dart_keyword(name)
