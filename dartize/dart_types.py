"""Maps inferred type tags to Dart type text and JSON coercion expressions."""

# pylint: disable=line-too-long

from typing import Optional

from dartize.schema_inference import TypeKind, TypeTag

MAP_TYPE = 'Map<String, dynamic>'

_PRIMITIVE_TYPES = {
    TypeKind.STRING: 'String',
    TypeKind.BOOL: 'bool',
    TypeKind.INTEGER: 'int',
    TypeKind.FLOAT: 'double',
    TypeKind.DYNAMIC: 'dynamic',
}

ZERO_VALUES = {
    'String': "''",
    'bool': 'false',
    'int': '0',
    'double': '0.0',
    'num': '0',
}

# element types that survive a plain List.cast<T>() of decoded JSON
_CASTABLE_ELEMENTS = {'String', 'bool', 'int', 'num', MAP_TYPE}


def dart_type(type_tag: TypeTag, use_num: bool = False, model_objects: bool = False) -> str:
    """
    Renders the non-nullable Dart type of a type tag.

    Args:
        type_tag (TypeTag): The inferred type.
        use_num (bool): Collapse int and double into num.
        model_objects (bool): Render top-level nested objects by their
            synthesized model name instead of a generic map. List elements
            are always generic maps.

    Returns:
        str: The Dart type.
    """
    if type_tag.kind in (TypeKind.INTEGER, TypeKind.FLOAT) and use_num:
        return 'num'
    if type_tag.is_object:
        if model_objects and type_tag.type_name:
            return type_tag.type_name
        return MAP_TYPE
    if type_tag.is_list:
        element = type_tag.element or TypeTag(TypeKind.DYNAMIC)
        return f'List<{dart_type(element, use_num)}>'
    return _PRIMITIVE_TYPES[type_tag.kind]


def nullable(dart_type_name: str) -> str:
    """Appends the nullability marker; dynamic is already nullable."""
    if dart_type_name == 'dynamic':
        return dart_type_name
    return dart_type_name + '?'


def zero_value(dart_type_name: str) -> Optional[str]:
    """
    The canonical value substituted for an absent key.

    Collections fall back to empty const literals so non-nullable fields stay
    assignable. dynamic has no substitute (None), absence stays null.
    """
    if dart_type_name in ZERO_VALUES:
        return ZERO_VALUES[dart_type_name]
    if dart_type_name == MAP_TYPE:
        return f'const <String, dynamic>{{}}'
    if dart_type_name.startswith('List<'):
        return f'const <{dart_type_name[5:-1]}>[]'
    return None


def _element_conversion(dart_type_name: str, var: str, depth: int) -> str:
    """Converts one decoded list element held in ``var`` to a non-null value."""
    if dart_type_name == 'double':
        return f'({var} as num).toDouble()'
    if dart_type_name.startswith('List<'):
        inner = dart_type_name[5:-1]
        return _list_conversion(inner, f'({var} as List<dynamic>)', depth + 1)
    if dart_type_name == 'dynamic':
        return var
    return f'{var} as {dart_type_name}'


def _list_conversion(element_type: str, list_expr: str, depth: int, access: str = '.') -> str:
    """Converts a List<dynamic> expression to List<element_type>; access is '.' or '?.'"""
    if element_type == 'dynamic':
        return list_expr
    if element_type in _CASTABLE_ELEMENTS:
        return f'{list_expr}{access}cast<{element_type}>()'
    var = 'e' if depth == 0 else f'e{depth}'
    return f'{list_expr}{access}map(({var}) => {_element_conversion(element_type, var, depth)}).toList()'


def coerce_from_json(dart_type_name: str, source: str) -> str:
    """
    Builds the expression reading a value of the given Dart type out of a
    decoded JSON map. The expression evaluates to a nullable value.

    The rules are enumerated per type shape:

    =======================  ==============================================
    String, bool, int, num   ``source as T?``
    double                   ``(source as num?)?.toDouble()``
    dynamic                  ``source``
    Map<String, dynamic>     ``source as Map<String, dynamic>?``
    List<dynamic>            ``source as List<dynamic>?``
    List<castable>           ``(source as List<dynamic>?)?.cast<T>()``
    List<double|List<..>>    ``(source as List<dynamic>?)?.map(...).toList()``
    =======================  ==============================================

    Args:
        dart_type_name (str): Non-nullable Dart type of the field.
        source (str): Expression yielding the raw decoded value.

    Returns:
        str: The coercion expression.
    """
    if dart_type_name == 'dynamic':
        return source
    if dart_type_name == 'double':
        return f'({source} as num?)?.toDouble()'
    if dart_type_name == 'List<dynamic>':
        return f'{source} as List<dynamic>?'
    if dart_type_name.startswith('List<'):
        return _list_conversion(dart_type_name[5:-1], f'({source} as List<dynamic>?)', 0, access='?.')
    return f'{source} as {dart_type_name}?'


def coerce_with_default(dart_type_name: str, source: str) -> str:
    """Coercion expression falling back to the type's zero value when absent."""
    expression = coerce_from_json(dart_type_name, source)
    fallback = zero_value(dart_type_name)
    if fallback is None:
        return expression
    return f'{expression} ?? {fallback}'
