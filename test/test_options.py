"""Tests for the generation switches and the resolved rendering plan."""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from dartize.options import OptionSet, resolve_plan


class TestOptionSet(unittest.TestCase):
    """Test cases for OptionSet."""

    def test_defaults(self):
        options = OptionSet()
        self.assertTrue(options.generate_to_json)
        self.assertTrue(options.use_serializable)
        self.assertTrue(options.use_equatable)
        self.assertFalse(options.use_default_value)
        self.assertFalse(options.model_new)
        self.assertFalse(options.local_get)

    def test_from_dict_accepts_both_spellings(self):
        options = OptionSet.from_dict({
            'generateToJson': False,
            'use_num': True,
            'generateJsonComment': True,
            'generateKey': False,
            'somethingElse': True,
        })
        self.assertFalse(options.generate_to_json)
        self.assertTrue(options.use_num)
        self.assertTrue(options.generate_comment)
        self.assertFalse(options.generate_keys)
        self.assertTrue(options.generate_copy_with)

    def test_from_dict_none(self):
        self.assertEqual(OptionSet.from_dict(None), OptionSet())

    def test_to_dict(self):
        values = OptionSet(model_new=True).to_dict()
        self.assertEqual(len(values), 14)
        self.assertTrue(values['modelNew'])
        self.assertTrue(values['generateCopyWith'])
        self.assertEqual(OptionSet.from_dict(values), OptionSet(model_new=True))


class TestRenderPlan(unittest.TestCase):
    """Test cases for the cross-switch rules."""

    def test_default_plan(self):
        plan = resolve_plan()
        self.assertTrue(plan.import_equatable)
        self.assertTrue(plan.part_directive)
        self.assertTrue(plan.key_annotations)
        self.assertTrue(plan.nullable_fields)
        self.assertFalse(plan.required_parameters)
        self.assertTrue(plan.delegate_from_json)
        self.assertTrue(plan.emit_props)
        self.assertFalse(plan.emit_to_string)

    def test_keys_need_serialization(self):
        plan = resolve_plan(OptionSet(use_serializable=False))
        self.assertFalse(plan.key_annotations)
        self.assertFalse(plan.part_directive)
        self.assertFalse(plan.delegate_to_json)

    def test_to_string_without_equatable(self):
        plan = resolve_plan(OptionSet(use_equatable=False))
        self.assertFalse(plan.emit_props)
        self.assertTrue(plan.emit_to_string)
        plan = resolve_plan(OptionSet(use_equatable=False, generate_to_string=False))
        self.assertFalse(plan.emit_props)
        self.assertFalse(plan.emit_to_string)

    def test_default_values(self):
        plan = resolve_plan(OptionSet(use_default_value=True))
        self.assertFalse(plan.nullable_fields)
        self.assertTrue(plan.required_parameters)

    def test_persistence(self):
        plan = resolve_plan(OptionSet(model_new=True, local_clear=True))
        self.assertTrue(plan.separate_loader)
        self.assertTrue(plan.import_prefs)
        self.assertFalse(plan.import_convert)
        self.assertEqual(plan.reload_method, 'load')

        plan = resolve_plan(OptionSet(model_new=True, singleton_pattern=True, local_get=True))
        self.assertFalse(plan.separate_loader)
        self.assertTrue(plan.import_convert)
        self.assertEqual(plan.reload_method, 'fromJson')

        plan = resolve_plan(OptionSet(model_new=True, local_save=True))
        self.assertFalse(plan.separate_loader)
        self.assertTrue(plan.import_convert)


if __name__ == '__main__':
    unittest.main()
