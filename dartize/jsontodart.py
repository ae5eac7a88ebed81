"""Converts a JSON sample to a Dart value-object class"""

# pylint: disable=line-too-long

import logging
from typing import List, Optional

from dartize.common import json_comment, process_template
from dartize.dart_types import coerce_from_json, coerce_with_default, dart_type, nullable
from dartize.identifiers import is_valid_class_name
from dartize.options import OptionSet, RenderPlan, resolve_plan
from dartize.schema_inference import FieldDescriptor, InvalidClassNameError, JsonNode, SchemaInferrer, select_template

logger = logging.getLogger(__name__)

INDENT = '  '

# members of the generated class and its supertypes
RESERVED_MEMBERS = frozenset(['toJson', 'copyWith', 'props', 'toString', 'hashCode', 'runtimeType', 'noSuchMethod'])


class JsonToDart:
    """Renders immutable Dart classes with a named-parameter constructor"""

    def __init__(self, inferrer: Optional[SchemaInferrer] = None) -> None:
        self.inferrer = inferrer or SchemaInferrer()

    def class_fields(self, template: JsonNode) -> List[FieldDescriptor]:
        """
        Infers the fields, dropping identifiers the class cannot declare.

        Named parameters cannot be private, so identifiers starting with an
        underscore are dropped, as are names of inherited or generated members.
        """
        fields = []
        for field in self.inferrer.infer_fields(template):
            if field.identifier.startswith('_') or field.identifier in RESERVED_MEMBERS:
                logger.debug("Skipping key %r: %s cannot be a field", field.json_key, field.identifier)
                continue
            fields.append(field)
        return fields

    def field_type(self, field: FieldDescriptor, plan: RenderPlan) -> str:
        """The non-nullable Dart type of a field"""
        return dart_type(field.type, use_num=plan.use_num)

    def declared_type(self, field: FieldDescriptor, plan: RenderPlan) -> str:
        """The Dart type a field is declared with"""
        field_type = self.field_type(field, plan)
        return nullable(field_type) if plan.nullable_fields else field_type

    def generate_imports(self, plan: RenderPlan) -> List[str]:
        """ Generate the package imports """
        imports = []
        if plan.import_equatable:
            imports.append('package:equatable/equatable.dart')
        if plan.import_json_annotation:
            imports.append('package:json_annotation/json_annotation.dart')
        return imports

    def generate_fields(self, fields: List[FieldDescriptor], plan: RenderPlan) -> str:
        """ Generate one final field declaration per descriptor """
        declarations = []
        for field in fields:
            declaration = ''
            if plan.key_annotations:
                declaration += f"{INDENT}@JsonKey(name: '{field.json_key}')\n"
            declaration += f'{INDENT}final {self.declared_type(field, plan)} {field.identifier};'
            declarations.append(declaration)
        return '\n\n'.join(declarations)

    def generate_constructor(self, class_name: str, fields: List[FieldDescriptor], plan: RenderPlan) -> str:
        """ Generate the const named-parameter constructor """
        if not fields:
            return f'{INDENT}const {class_name}();'
        required = 'required ' if plan.required_parameters else ''
        constructor = f'{INDENT}const {class_name}({{\n'
        for field in fields:
            constructor += f'{INDENT * 2}{required}this.{field.identifier},\n'
        constructor += f'{INDENT}}});'
        return constructor

    def generate_from_json(self, class_name: str, fields: List[FieldDescriptor], plan: RenderPlan) -> str:
        """ Generate the fromJson factory """
        if plan.delegate_from_json:
            return f'{INDENT}factory {class_name}.fromJson(Map<String, dynamic> json) => _${class_name}FromJson(json);'
        factory = f'{INDENT}factory {class_name}.fromJson(Map<String, dynamic> json) {{\n'
        if not fields:
            factory += f'{INDENT * 2}return {class_name}();\n'
        else:
            factory += f'{INDENT * 2}return {class_name}(\n'
            for field in fields:
                source = f"json['{field.json_key}']"
                field_type = self.field_type(field, plan)
                if plan.nullable_fields:
                    value = coerce_from_json(field_type, source)
                else:
                    value = coerce_with_default(field_type, source)
                factory += f'{INDENT * 3}{field.identifier}: {value},\n'
            factory += f'{INDENT * 2});\n'
        factory += f'{INDENT}}}'
        return factory

    def generate_to_json(self, class_name: str, fields: List[FieldDescriptor], plan: RenderPlan) -> str:
        """ Generate the toJson method """
        if plan.delegate_to_json:
            return f'{INDENT}Map<String, dynamic> toJson() => _${class_name}ToJson(this);'
        method = f'{INDENT}Map<String, dynamic> toJson() {{\n'
        if not fields:
            method += f'{INDENT * 2}return <String, dynamic>{{}};\n'
        else:
            method += f'{INDENT * 2}return {{\n'
            for field in fields:
                method += f"{INDENT * 3}'{field.json_key}': {field.identifier},\n"
            method += f'{INDENT * 2}}};\n'
        method += f'{INDENT}}}'
        return method

    def generate_copy_with(self, class_name: str, fields: List[FieldDescriptor], plan: RenderPlan) -> str:
        """ Generate copyWith with one nullable parameter per field """
        if not fields:
            return f'{INDENT}{class_name} copyWith() {{\n{INDENT * 2}return {class_name}();\n{INDENT}}}'
        method = f'{INDENT}{class_name} copyWith({{\n'
        for field in fields:
            method += f'{INDENT * 2}{nullable(self.field_type(field, plan))} {field.identifier},\n'
        method += f'{INDENT}}}) {{\n'
        method += f'{INDENT * 2}return {class_name}(\n'
        for field in fields:
            method += f'{INDENT * 3}{field.identifier}: {field.identifier} ?? this.{field.identifier},\n'
        method += f'{INDENT * 2});\n'
        method += f'{INDENT}}}'
        return method

    def generate_props(self, fields: List[FieldDescriptor]) -> str:
        """ Generate the Equatable props accessor """
        props = ', '.join(field.identifier for field in fields)
        return f'{INDENT}@override\n{INDENT}List<Object?> get props => [{props}];'

    def generate_to_string(self, class_name: str, fields: List[FieldDescriptor]) -> str:
        """ Generate toString listing every field """
        values = ', '.join(f'{field.identifier}: ${field.identifier}' for field in fields)
        return (f'{INDENT}@override\n'
                f'{INDENT}String toString() {{\n'
                f"{INDENT * 2}return '{class_name}({values})';\n"
                f'{INDENT}}}')

    def render(self, class_name: str, root_value: JsonNode, plan: Optional[RenderPlan] = None) -> str:
        """
        Renders the Dart class for a JSON sample.

        Args:
            class_name (str): Name of the generated class.
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
        fields = self.class_fields(template)

        members = []
        if fields:
            members.append(self.generate_fields(fields, plan))
        members.append(self.generate_constructor(class_name, fields, plan))
        members.append(self.generate_from_json(class_name, fields, plan))
        if plan.emit_to_json:
            members.append(self.generate_to_json(class_name, fields, plan))
        if plan.emit_copy_with:
            members.append(self.generate_copy_with(class_name, fields, plan))
        if plan.emit_props:
            members.append(self.generate_props(fields))
        elif plan.emit_to_string:
            members.append(self.generate_to_string(class_name, fields))

        annotations = []
        if plan.serializable_annotation:
            annotations.append('@JsonSerializable()' if plan.emit_to_json else '@JsonSerializable(createToJson: false)')

        return process_template(
            "jsontodart/dart_class.jinja",
            imports=self.generate_imports(plan),
            part_directive=plan.part_directive,
            annotations=annotations,
            class_name=class_name,
            base_class='Equatable' if plan.extends_equatable else None,
            body='\n\n'.join(members),
            comment=json_comment(template) if plan.emit_comment else None,
        )


def convert_json_to_dart_class(class_name: str, json_value: JsonNode, options: Optional[OptionSet] = None) -> str:
    """Converts a parsed JSON sample to a Dart value-object class"""
    return JsonToDart().render(class_name, json_value, resolve_plan(options))
