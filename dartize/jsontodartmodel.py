"""Converts a JSON sample to a mutable Dart model class with optional local persistence"""

# pylint: disable=line-too-long

import logging
from typing import Dict, List, Optional

from dartize.common import json_comment, process_template
from dartize.dart_types import coerce_with_default, dart_type
from dartize.identifiers import is_valid_class_name
from dartize.options import OptionSet, RenderPlan, resolve_plan
from dartize.schema_inference import FieldDescriptor, InvalidClassNameError, JsonNode, SchemaInferrer, TypeKind, select_template

logger = logging.getLogger(__name__)

INDENT = '  '
# separates the names of a multi-name declaration
DECLARATION_SEPARATOR = ",\n" + " " * 6

ID_FIELD = 'id'
SINGLETON_FIELD = 'i'

# typed coercion helpers supplied by base.dart
COERCION_HELPERS: Dict[TypeKind, str] = {
    TypeKind.STRING: 'stringFromJson',
    TypeKind.BOOL: 'boolFromJson',
    TypeKind.INTEGER: 'intFromJson',
    TypeKind.FLOAT: 'doubleFromJson',
}

# declaration groups, in the order they are emitted
GROUPED_KINDS = [
    (TypeKind.STRING, 'String'),
    (TypeKind.BOOL, 'bool'),
    (TypeKind.INTEGER, 'int'),
    (TypeKind.FLOAT, 'double'),
]


class JsonToDartModel:
    """Renders Dart classes extending Model with an imperative fromJson/toJson pair"""

    def __init__(self, inferrer: Optional[SchemaInferrer] = None) -> None:
        self.inferrer = inferrer or SchemaInferrer()

    def model_fields(self, root_value: JsonNode, plan: Optional[RenderPlan] = None) -> List[FieldDescriptor]:
        """
        Infers the fields the model declares.

        The sample's own id is the inherited Model.id. Identifiers that would
        shadow the fromJson parameter or collide with a generated member are
        dropped.
        """
        if plan is None:
            plan = resolve_plan()
        reserved = {ID_FIELD, 'json', 'toJson', 'fromJson'}
        if plan.singleton:
            reserved.add(SINGLETON_FIELD)
        if plan.separate_loader:
            reserved.add('load')
        if plan.emit_save:
            reserved.add('save')
        if plan.emit_clear:
            reserved.add('clear')
        fields = []
        for field in self.inferrer.infer_fields(root_value):
            if field.identifier in reserved:
                if field.identifier != ID_FIELD:
                    logger.debug("Skipping key %r: %s is a member of the model", field.json_key, field.identifier)
                continue
            fields.append(field)
        return fields

    def generate_singleton(self, class_name: str) -> str:
        """ Generate the private constructor and the static instance """
        return f'{INDENT}{class_name}._();\n{INDENT}static {class_name} {SINGLETON_FIELD} = {class_name}._();'

    def generate_properties(self, fields: List[FieldDescriptor]) -> str:
        """ Generate late field declarations grouped by type """
        declarations = []
        for kind, type_name in GROUPED_KINDS:
            names = [field.identifier for field in fields if field.type.kind == kind]
            if names:
                declarations.append(f'{INDENT}late {type_name} {DECLARATION_SEPARATOR.join(names)};')
        for field in fields:
            if field.type.is_object:
                declarations.append(f'{INDENT}late {dart_type(field.type, model_objects=True)} {field.identifier};')
        for field in fields:
            if field.type.is_list:
                declarations.append(f'{INDENT}late {dart_type(field.type)} {field.identifier};')
        dynamic_names = [field.identifier for field in fields if field.type.kind == TypeKind.DYNAMIC]
        if dynamic_names:
            declarations.append(f'{INDENT}late dynamic {", ".join(dynamic_names)};')
        return '\n'.join(declarations)

    def generate_assignment(self, field: FieldDescriptor) -> str:
        """ Generate the statement assigning one field from the json map """
        kind = field.type.kind
        key = field.json_key
        if kind in COERCION_HELPERS:
            value = f'{COERCION_HELPERS[kind]}(json, "{key}")'
        elif field.type.is_object:
            value = f'{dart_type(field.type, model_objects=True)}.fromJson(json?["{key}"] ?? {{}})'
        elif field.type.is_list:
            value = coerce_with_default(dart_type(field.type), f'json?["{key}"]')
        else:
            value = f'json?["{key}"]'
        return f'{INDENT * 2}{field.identifier} = {value};'

    def generate_assignments(self, fields: List[FieldDescriptor]) -> str:
        """ Generate the body shared by fromJson and load """
        statements = [f'{INDENT * 2}{ID_FIELD} = stringFromJson(json, "{ID_FIELD}");']
        statements.extend(self.generate_assignment(field) for field in fields)
        return '\n'.join(statements)

    def generate_from_json(self, class_name: str, fields: List[FieldDescriptor], plan: RenderPlan) -> List[str]:
        """
        Generate the deserialization members.

        With the singleton, fromJson is an instance method so it can be re-run.
        Otherwise it is a named constructor; when clear/get have to re-run it,
        the assignments move to a load method the constructor delegates to.
        """
        parameters = '[Map<String, dynamic>? json]'
        if plan.singleton:
            return [f'{INDENT}fromJson({parameters}) {{\n{self.generate_assignments(fields)}\n{INDENT}}}']
        if plan.separate_loader:
            return [
                f'{INDENT}{class_name}.fromJson({parameters}) {{\n{INDENT * 2}load(json);\n{INDENT}}}',
                f'{INDENT}load({parameters}) {{\n{self.generate_assignments(fields)}\n{INDENT}}}',
            ]
        return [f'{INDENT}{class_name}.fromJson({parameters}) {{\n{self.generate_assignments(fields)}\n{INDENT}}}']

    def generate_save(self, storage_key: str) -> str:
        """ Generate save() persisting the serialized map """
        return '\n'.join([
            f'{INDENT}save() {{',
            f"{INDENT * 2}Prefs.setString('{storage_key}', jsonEncode(toJson()));",
            f'{INDENT}}}'
        ])

    def generate_clear(self, storage_key: str, plan: RenderPlan) -> str:
        """ Generate clear() removing the persisted map and resetting the instance """
        return '\n'.join([
            f'{INDENT}clear() {{',
            f"{INDENT * 2}Prefs.remove('{storage_key}');",
            f'{INDENT * 2}{plan.reload_method}();',
            f'{INDENT}}}'
        ])

    def generate_get(self, storage_key: str, plan: RenderPlan) -> str:
        """ Generate get() reloading the instance from the persisted map """
        return '\n'.join([
            f'{INDENT}get() {{',
            f"{INDENT * 2}String data = Prefs.getString('{storage_key}') ?? '{{}}';",
            f'{INDENT * 2}{plan.reload_method}(jsonDecode(data));',
            f'{INDENT}}}'
        ])

    def generate_to_json(self, fields: List[FieldDescriptor]) -> str:
        """ Generate the toJson override """
        method = f'{INDENT}@override\n{INDENT}Map<String, dynamic> toJson() => {{\n'
        method += f'{INDENT * 4}"{ID_FIELD}": {ID_FIELD},\n'
        for field in fields:
            value = f'{field.identifier}.toJson()' if field.type.is_object else field.identifier
            method += f'{INDENT * 4}"{field.json_key}": {value},\n'
        method += f'{INDENT * 3}}};'
        return method

    def render(self, class_name: str, root_value: JsonNode, plan: Optional[RenderPlan] = None) -> str:
        """
        Renders the Dart model class for a JSON sample.

        Args:
            class_name (str): Name of the generated class; its lower-cased form
                is the persistence key.
            root_value (JsonNode): Parsed JSON object, or array whose first
                element is the template.
            plan (RenderPlan): Resolved generation switches, defaults when omitted.

        Returns:
            str: The Dart source text.
        """
        if not is_valid_class_name(class_name):
            raise InvalidClassNameError(f'{class_name!r} is not a valid Dart class name')
        if plan is None:
            plan = resolve_plan()
        template = select_template(root_value)
        fields = self.model_fields(template, plan)
        storage_key = class_name.lower()

        members = []
        if plan.singleton:
            members.append(self.generate_singleton(class_name))
        if fields:
            members.append(self.generate_properties(fields))
        members.extend(self.generate_from_json(class_name, fields, plan))
        if plan.emit_save:
            members.append(self.generate_save(storage_key))
        if plan.emit_clear:
            members.append(self.generate_clear(storage_key, plan))
        if plan.emit_get:
            members.append(self.generate_get(storage_key, plan))
        members.append(self.generate_to_json(fields))

        imports = []
        if plan.import_prefs:
            imports.append('../main.dart')
        imports.append('base.dart')

        return process_template(
            "jsontodartmodel/model_class.jinja",
            sdk_imports=['dart:convert'] if plan.import_convert else [],
            imports=imports,
            class_name=class_name,
            body='\n\n'.join(members),
            comment=json_comment(template) if plan.emit_comment else None,
        )


def convert_json_to_dart_model(class_name: str, json_value: JsonNode, options: Optional[OptionSet] = None) -> str:
    """Converts a parsed JSON sample to a Dart model class"""
    return JsonToDartModel().render(class_name, json_value, resolve_plan(options))
