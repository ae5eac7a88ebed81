"""
Common utility functions for dartize.
"""

# pylint: disable=line-too-long

import json
import os
import re
from typing import Any

import jinja2


def pascal(string):
    """
    Convert a string to PascalCase from snake_case, kebab-case, camelCase, or PascalCase.
    Underscores at the beginning of the string are preserved in the output, but
    underscores in the middle of the string are removed.

    Args:
        string (str): The string to convert.

    Returns:
        str: The string in PascalCase.
    """
    if not string or len(string) == 0:
        return string
    startswith_under = string[0] == '_'
    words = [w for w in re.split(r'[_\-\s]+', string) if w]
    result = ''.join(word[0].upper() + word[1:] for word in words)
    if startswith_under:
        result = '_' + result
    return result


def snake(string):
    """
    Convert a string to snake_case from camelCase or PascalCase.
    Runs of capitals are kept together, so ``HTTPServer`` becomes ``http_server``.

    Args:
        string (str): The string to convert.

    Returns:
        str: The string in snake_case.
    """
    if not string or len(string) == 0:
        return string
    val = re.sub(r'(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])', '_', string)
    return re.sub(r'[\-\s]+', '_', val).lower()


def json_comment(value: Any) -> str:
    """Renders a JSON value pretty-printed with two spaces, each line as a // comment."""
    formatted = json.dumps(value, indent=2, ensure_ascii=False)
    return '\n'.join('// ' + line for line in formatted.split('\n'))


def process_template(file_path: str, **kvargs) -> str:
    """
    Process a file as a Jinja2 template with the given object as input.

    Block tags on their own line leave no trace in the output, so templates can
    be laid out like the code they produce.

    Args:
        file_path (str): The path to the template, relative to the package.
        **kvargs: The keyword arguments to pass to the template.

    Returns:
        str: The processed template as a string.
    """
    # Load the template environment
    file_dir = os.path.dirname(__file__)
    template_loader = jinja2.FileSystemLoader(searchpath=file_dir)
    template_env = jinja2.Environment(loader=template_loader, trim_blocks=True, lstrip_blocks=True, keep_trailing_newline=True)
    template_env.filters['snake'] = snake

    # Load the template from the file
    template = template_env.get_template(file_path)

    # Render the template with the object as input
    output = template.render(**kvargs)

    return output
