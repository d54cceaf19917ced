# Import lazily to avoid circular dependencies
_LAZY = {
    "main": ("journalkit.cli.main", "main"),
    "parse_journal": ("journalkit.domain.parser", "parse_journal"),
    "serialize_journal": ("journalkit.domain.serializer", "serialize_journal"),
}


def __getattr__(name):
    if name in _LAZY:
        from importlib import import_module

        module_name, attr = _LAZY[name]
        return getattr(import_module(module_name), attr)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
