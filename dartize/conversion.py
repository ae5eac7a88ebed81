"""Converts JSON samples to Dart classes, picking the renderer from the switches"""

# pylint: disable=line-too-long,too-many-arguments,too-many-locals

import json
import logging
import os
from typing import Optional

from dartize.common import pascal
from dartize.history import HistoryStore, JsonFileKeyValueStore
from dartize.jsontodart import JsonToDart
from dartize.jsontodartmodel import JsonToDartModel
from dartize.options import OptionSet, resolve_plan
from dartize.schema_inference import JsonNode, parse_json_sample
from dartize.settings import SettingsStore

logger = logging.getLogger(__name__)

HISTORY_FILE_ENV = 'DARTIZE_HISTORY_FILE'


def convert_json_to_dart(class_name: str, json_value: JsonNode, options: Optional[OptionSet] = None) -> str:
    """
    Renders a Dart class from a parsed JSON sample.

    Args:
        class_name: Name of the generated class
        json_value: Parsed JSON object or non-empty array of objects
        options: Generation switches; model_new selects the model renderer

    Returns:
        The Dart source text
    """
    plan = resolve_plan(options)
    if plan.model_new:
        return JsonToDartModel().render(class_name, json_value, plan)
    return JsonToDart().render(class_name, json_value, plan)


def convert_json_text_to_dart(class_name: str, json_text: str, options: Optional[OptionSet] = None,
                              history: Optional[HistoryStore] = None) -> str:
    """
    Parses JSON text and renders a Dart class from it.

    On success the pretty-printed JSON is recorded in the history, when one
    is given. Nothing is recorded when parsing or rendering fails.
    """
    json_value = parse_json_sample(json_text)
    dart_code = convert_json_to_dart(class_name, json_value, options)
    if history is not None:
        history.record(class_name, json.dumps(json_value, indent=2, ensure_ascii=False))
    return dart_code


def convert_json_file_to_dart(json_file_path: str, dart_file_path: str, class_name: Optional[str] = None,
                              generate_to_json: bool = True, generate_copy_with: bool = True,
                              generate_to_string: bool = True, generate_keys: bool = True,
                              use_num: bool = False, use_serializable: bool = True,
                              use_equatable: bool = True, use_default_value: bool = False,
                              generate_comment: bool = False, model_new: bool = False,
                              singleton_pattern: bool = False, local_save: bool = False,
                              local_clear: bool = False, local_get: bool = False,
                              history_file: Optional[str] = None) -> None:
    """
    Converts a JSON sample file to a Dart class file.

    The class name defaults to the PascalCase file stem. When a history file
    is given (or DARTIZE_HISTORY_FILE is set) the conversion and the switches
    used are recorded there.
    """
    if not class_name:
        class_name = pascal(os.path.splitext(os.path.basename(json_file_path))[0])
    options = OptionSet(
        generate_to_json=generate_to_json, generate_copy_with=generate_copy_with,
        generate_to_string=generate_to_string, generate_keys=generate_keys,
        use_num=use_num, use_serializable=use_serializable, use_equatable=use_equatable,
        use_default_value=use_default_value, generate_comment=generate_comment,
        model_new=model_new, singleton_pattern=singleton_pattern,
        local_save=local_save, local_clear=local_clear, local_get=local_get)

    with open(json_file_path, 'r', encoding='utf-8') as f:
        json_text = f.read()

    history_file = history_file or os.environ.get(HISTORY_FILE_ENV)
    history = None
    store = None
    if history_file:
        store = JsonFileKeyValueStore(history_file)
        history = HistoryStore(store)

    dart_code = convert_json_text_to_dart(class_name, json_text, options, history)
    if store is not None:
        SettingsStore(store).save(class_name, json_text, options)
        logger.debug("Recorded %s in %s", class_name, history_file)

    output_dir = os.path.dirname(dart_file_path)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir)
    with open(dart_file_path, 'w', encoding='utf-8') as f:
        f.write(dart_code)
