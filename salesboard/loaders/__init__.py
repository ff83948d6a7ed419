# salesboard/loaders/__init__.py
from importlib import import_module

from salesboard.errors import ConfigError


def get_loader(name, config):
    try:
        loader_path = config['loaders'][name]
    except KeyError:
        raise ConfigError(f"Unknown loader '{name}'; configure it under 'loaders'")
    module_name, _, cls_name = loader_path.rpartition('.')
    try:
        mod = import_module(module_name)
        loader_cls = getattr(mod, cls_name)
    except (ImportError, AttributeError, ValueError) as exc:
        raise ConfigError(f"Cannot import loader '{loader_path}': {exc}") from exc
    return loader_cls(config)
