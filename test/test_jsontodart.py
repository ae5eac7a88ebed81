"""Tests for the value-object Dart class renderer."""

import json
import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from dartize.jsontodart import JsonToDart, convert_json_to_dart_class
from dartize.options import OptionSet, resolve_plan
from dartize.schema_inference import EmptyTemplateError, InvalidClassNameError

USER = {"id": 1, "name": "Ann", "active": True}


def get_json(name):
    """Loads a JSON sample from the test data directory."""
    with open(os.path.join(os.path.dirname(__file__), 'json', name), 'r', encoding='utf-8') as f:
        return json.load(f)


class TestJsonToDart(unittest.TestCase):
    """Test cases for JsonToDart."""

    def test_user_defaults(self):
        """Default switches: nullable fields, json_serializable and Equatable."""
        dart = convert_json_to_dart_class('User', USER)
        self.assertTrue(dart.startswith(
            "import 'package:equatable/equatable.dart';\n"
            "import 'package:json_annotation/json_annotation.dart';\n"
            "\n"
            "part 'user.g.dart';\n"
            "\n"
            "@JsonSerializable()\n"
            "class User extends Equatable {\n"))
        self.assertIn("  @JsonKey(name: 'id')\n  final int? id;", dart)
        self.assertIn('final String? name;', dart)
        self.assertIn('final bool? active;', dart)
        self.assertNotIn('required', dart)
        self.assertIn('factory User.fromJson(Map<String, dynamic> json) => _$UserFromJson(json);', dart)
        self.assertIn('Map<String, dynamic> toJson() => _$UserToJson(this);', dart)
        self.assertIn('List<Object?> get props => [id, name, active];', dart)
        self.assertNotIn('toString', dart)
        self.assertTrue(dart.endswith('\n}\n'))

    def test_user_default_values(self):
        """Default values: non-nullable fields, required parameters and zero fallbacks."""
        dart = convert_json_to_dart_class('User', USER, OptionSet(use_serializable=False, use_default_value=True))
        self.assertIn('final int id;', dart)
        self.assertIn('final String name;', dart)
        self.assertIn('final bool active;', dart)
        self.assertIn('    required this.id,\n', dart)
        self.assertIn("id: json['id'] as int? ?? 0,", dart)
        self.assertIn("name: json['name'] as String? ?? '',", dart)
        self.assertIn("active: json['active'] as bool? ?? false,", dart)

    def test_exact_output(self):
        options = OptionSet(use_serializable=False, use_equatable=False, generate_copy_with=False)
        dart = convert_json_to_dart_class('Point', {"x": 1, "y": 2.5}, options)
        expected = (
            "class Point {\n"
            "  final int? x;\n"
            "\n"
            "  final double? y;\n"
            "\n"
            "  const Point({\n"
            "    this.x,\n"
            "    this.y,\n"
            "  });\n"
            "\n"
            "  factory Point.fromJson(Map<String, dynamic> json) {\n"
            "    return Point(\n"
            "      x: json['x'] as int?,\n"
            "      y: (json['y'] as num?)?.toDouble(),\n"
            "    );\n"
            "  }\n"
            "\n"
            "  Map<String, dynamic> toJson() {\n"
            "    return {\n"
            "      'x': x,\n"
            "      'y': y,\n"
            "    };\n"
            "  }\n"
            "\n"
            "  @override\n"
            "  String toString() {\n"
            "    return 'Point(x: $x, y: $y)';\n"
            "  }\n"
            "}\n"
        )
        self.assertEqual(dart, expected)

    def test_each_field_once_in_literal_serialization(self):
        sample = get_json('address_book.json')
        dart = convert_json_to_dart_class('Contact', sample, OptionSet(use_serializable=False))
        for key in ['id', 'full_name', 'age', 'rating', 'verified', 'address', 'tags', 'scores', 'phones', 'notes']:
            self.assertEqual(dart.count(f"json['{key}']"), 1, key)
            self.assertEqual(dart.count(f"'{key}': "), 1, key)
        self.assertNotIn('first-name', dart)
        self.assertNotIn("'class'", dart)

    def test_collection_types(self):
        dart = convert_json_to_dart_class('Contact', get_json('address_book.json'), OptionSet(use_serializable=False))
        self.assertIn('final Map<String, dynamic>? address;', dart)
        self.assertIn('final List<String>? tags;', dart)
        self.assertIn('final List<double>? scores;', dart)
        self.assertIn('final List<Map<String, dynamic>>? phones;', dart)
        self.assertIn('final dynamic notes;', dart)
        self.assertIn("notes: json['notes'],", dart)
        self.assertIn("scores: (json['scores'] as List<dynamic>?)?.map((e) => (e as num).toDouble()).toList(),", dart)

    def test_empty_list_is_dynamic(self):
        dart = convert_json_to_dart_class('Post', {"tags": []}, OptionSet(use_serializable=False))
        self.assertIn('final List<dynamic>? tags;', dart)
        self.assertIn("tags: json['tags'] as List<dynamic>?,", dart)

    def test_keys_follow_serialization(self):
        sample = {"user_id": "u1"}
        dart = convert_json_to_dart_class('Row', sample)
        self.assertIn("@JsonKey(name: 'user_id')\n  final String? userId;", dart)
        dart = convert_json_to_dart_class('Row', sample, OptionSet(generate_keys=False))
        self.assertNotIn('@JsonKey', dart)
        dart = convert_json_to_dart_class('Row', sample, OptionSet(use_serializable=False))
        self.assertNotIn('@JsonKey', dart)
        self.assertIn("userId: json['user_id'] as String?,", dart)
        self.assertIn("'user_id': userId,", dart)

    def test_without_to_json(self):
        dart = convert_json_to_dart_class('User', USER, OptionSet(generate_to_json=False))
        self.assertIn('@JsonSerializable(createToJson: false)', dart)
        self.assertNotIn('toJson', dart)

    def test_copy_with(self):
        dart = convert_json_to_dart_class('User', USER, OptionSet(use_default_value=True))
        self.assertIn('  User copyWith({\n    int? id,\n    String? name,\n    bool? active,\n  }) {', dart)
        self.assertIn('      name: name ?? this.name,\n', dart)
        dart = convert_json_to_dart_class('User', USER, OptionSet(generate_copy_with=False))
        self.assertNotIn('copyWith', dart)

    def test_without_to_string(self):
        dart = convert_json_to_dart_class('User', USER, OptionSet(generate_to_string=False))
        self.assertNotIn('props', dart)
        self.assertNotIn('toString', dart)
        self.assertIn('class User extends Equatable {', dart)

    def test_use_num(self):
        dart = convert_json_to_dart_class('Reading', {"n": 1, "f": 2.5}, OptionSet(use_num=True, use_serializable=False))
        self.assertIn('final num? n;', dart)
        self.assertIn('final num? f;', dart)
        self.assertIn("f: json['f'] as num?,", dart)

    def test_empty_object(self):
        dart = convert_json_to_dart_class('Empty', {}, OptionSet(use_serializable=False))
        self.assertIn('  const Empty();', dart)
        self.assertIn('    return Empty();', dart)
        self.assertIn('    return <String, dynamic>{};', dart)
        self.assertIn('List<Object?> get props => [];', dart)

    def test_comment(self):
        dart = convert_json_to_dart_class('User', [USER, {"id": 2}], OptionSet(generate_comment=True))
        self.assertTrue(dart.endswith(
            '}\n'
            '\n'
            '// {\n'
            '//   "id": 1,\n'
            '//   "name": "Ann",\n'
            '//   "active": true\n'
            '// }\n'))

    def test_part_file_name(self):
        dart = convert_json_to_dart_class('UserProfile', USER)
        self.assertIn("part 'user_profile.g.dart';", dart)
        self.assertIn('_$UserProfileFromJson(json)', dart)

    def test_array_renders_like_first_element(self):
        sample = get_json('address_book.json')
        self.assertEqual(convert_json_to_dart_class('Contact', sample),
                         convert_json_to_dart_class('Contact', sample[0]))

    def test_idempotent(self):
        renderer = JsonToDart()
        plan = resolve_plan(OptionSet(use_serializable=False, use_default_value=True))
        sample = get_json('address_book.json')
        self.assertEqual(renderer.render('Contact', sample, plan),
                         renderer.render('Contact', sample, plan))

    def test_private_and_member_names_are_dropped(self):
        """Named parameters cannot be private, and fields cannot shadow members."""
        sample = {"__x": 1, "_1": 2, "props": [], "copy_with": "c", "to_json": "t", "title": "x"}
        with self.assertLogs('dartize.jsontodart', level='DEBUG') as logs:
            dart = convert_json_to_dart_class('Doc', sample, OptionSet(use_serializable=False))
        self.assertEqual(len(logs.output), 5)
        self.assertIn('final String? title;', dart)
        self.assertNotIn('this._', dart)
        self.assertNotIn('final List<dynamic>? props;', dart)
        self.assertIn('  const Doc({\n    this.title,\n  });', dart)
        self.assertEqual([f.identifier for f in JsonToDart().class_fields(sample)], ['title'])

    def test_render_takes_resolved_plan(self):
        plan = resolve_plan(OptionSet(use_serializable=False, use_equatable=False))
        dart = JsonToDart().render('User', USER, plan)
        self.assertEqual(dart, convert_json_to_dart_class('User', USER, OptionSet(use_serializable=False, use_equatable=False)))
        self.assertTrue(dart.startswith('class User {'))
        self.assertIn("part 'user.g.dart';", JsonToDart().render('User', USER))

    def test_errors(self):
        with self.assertRaises(EmptyTemplateError):
            convert_json_to_dart_class('User', [])
        with self.assertRaises(InvalidClassNameError):
            convert_json_to_dart_class('class', USER)
        with self.assertRaises(InvalidClassNameError):
            convert_json_to_dart_class('My User', USER)


if __name__ == '__main__':
    unittest.main()
