import importlib

mod = "dartize"
class LazyLoader:
    """
    Lazy loader for the dartize functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the functions and their corresponding module paths
_mappings = {
    "convert_json_to_dart": (f"{mod}.conversion", "convert_json_to_dart"),
    "convert_json_text_to_dart": (f"{mod}.conversion", "convert_json_text_to_dart"),
    "convert_json_file_to_dart": (f"{mod}.conversion", "convert_json_file_to_dart"),
    "convert_json_to_dart_class": (f"{mod}.jsontodart", "convert_json_to_dart_class"),
    "convert_json_to_dart_model": (f"{mod}.jsontodartmodel", "convert_json_to_dart_model"),
    "infer_fields": (f"{mod}.schema_inference", "infer_fields"),
    "OptionSet": (f"{mod}.options", "OptionSet"),
    "HistoryStore": (f"{mod}.history", "HistoryStore"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
