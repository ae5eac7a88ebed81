"""Generation switches and the rendering plan resolved from them."""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

# camelCase names as used by persisted settings and history exports
_CAMEL_NAMES = {
    'generate_to_json': 'generateToJson',
    'generate_copy_with': 'generateCopyWith',
    'generate_to_string': 'generateToString',
    'generate_keys': 'generateKeys',
    'use_num': 'useNum',
    'use_serializable': 'useSerializable',
    'use_equatable': 'useEquatable',
    'use_default_value': 'useDefaultValue',
    'generate_comment': 'generateComment',
    'model_new': 'modelNew',
    'singleton_pattern': 'singletonPattern',
    'local_save': 'localSave',
    'local_clear': 'localClear',
    'local_get': 'localGet',
}

_ALIASES = {
    'generateJsonComment': 'generate_comment',
    'generateKey': 'generate_keys',
}


@dataclass
class OptionSet:
    """The independent switches driving class generation."""
    generate_to_json: bool = True
    generate_copy_with: bool = True
    generate_to_string: bool = True
    generate_keys: bool = True
    use_num: bool = False
    use_serializable: bool = True
    use_equatable: bool = True
    use_default_value: bool = False
    generate_comment: bool = False
    model_new: bool = False
    singleton_pattern: bool = False
    local_save: bool = False
    local_clear: bool = False
    local_get: bool = False

    @classmethod
    def from_dict(cls, values: Optional[Dict[str, Any]]) -> 'OptionSet':
        """
        Builds an option set from a mapping.

        Accepts snake_case field names and the camelCase switch names.
        Unknown keys are ignored and missing keys keep their default.
        """
        known = {f.name for f in fields(cls)}
        by_camel = {camel: snake for snake, camel in _CAMEL_NAMES.items()}
        kwargs: Dict[str, bool] = {}
        for key, value in (values or {}).items():
            name = key if key in known else by_camel.get(key, _ALIASES.get(key))
            if name is not None:
                kwargs[name] = bool(value)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, bool]:
        """Returns the switches keyed by their camelCase names."""
        return {_CAMEL_NAMES[f.name]: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class RenderPlan:
    """Every section decision of a render call, resolved once from an OptionSet."""
    # standard renderer
    import_equatable: bool
    import_json_annotation: bool
    part_directive: bool
    serializable_annotation: bool
    extends_equatable: bool
    key_annotations: bool
    nullable_fields: bool
    required_parameters: bool
    delegate_from_json: bool
    emit_to_json: bool
    delegate_to_json: bool
    emit_copy_with: bool
    emit_props: bool
    emit_to_string: bool
    use_num: bool
    # nested/persistence renderer
    model_new: bool
    singleton: bool
    emit_save: bool
    emit_clear: bool
    emit_get: bool
    separate_loader: bool
    import_convert: bool
    import_prefs: bool
    # shared
    emit_comment: bool

    @property
    def reload_method(self) -> str:
        """Name of the member that re-initializes an instance from a map."""
        return 'fromJson' if self.singleton else 'load'


def resolve_plan(options: Optional[OptionSet] = None) -> RenderPlan:
    """
    Resolves the switches into a rendering plan.

    Cross-switch rules live here only:
    - key annotations need serialization support
    - when equality and string representation are both on, the equality
      props accessor replaces toString
    - without the singleton, re-initialization from clear/get goes through a
      separate load method because fromJson is a constructor
    """
    if options is None:
        options = OptionSet()
    reloads = options.local_clear or options.local_get
    return RenderPlan(
        import_equatable=options.use_equatable,
        import_json_annotation=options.use_serializable,
        part_directive=options.use_serializable,
        serializable_annotation=options.use_serializable,
        extends_equatable=options.use_equatable,
        key_annotations=options.generate_keys and options.use_serializable,
        nullable_fields=not options.use_default_value,
        required_parameters=options.use_default_value,
        delegate_from_json=options.use_serializable,
        emit_to_json=options.generate_to_json,
        delegate_to_json=options.use_serializable,
        emit_copy_with=options.generate_copy_with,
        emit_props=options.generate_to_string and options.use_equatable,
        emit_to_string=options.generate_to_string and not options.use_equatable,
        use_num=options.use_num,
        model_new=options.model_new,
        singleton=options.singleton_pattern,
        emit_save=options.local_save,
        emit_clear=options.local_clear,
        emit_get=options.local_get,
        separate_loader=reloads and not options.singleton_pattern,
        import_convert=options.local_save or options.local_get,
        import_prefs=options.local_save or options.local_clear or options.local_get,
        emit_comment=options.generate_comment,
    )
