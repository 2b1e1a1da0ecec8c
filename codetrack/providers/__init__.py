import importlib
import logging
import os
import pkgutil

from codetrack.platforms import UnsupportedPlatformError, parse_platform

logger = logging.getLogger(__name__)

_registry = {}


def register_provider(cls):
    """Decorator to register the stats provider for a platform."""
    _registry[cls.PLATFORM.value] = cls
    logger.debug(f"Registered stats provider: {cls.PLATFORM.value}")
    return cls


def get_provider_class(platform):
    try:
        return _registry.get(parse_platform(platform).value)
    except UnsupportedPlatformError:
        return None


def get_all_providers():
    return dict(_registry)


def get_provider_instance(platform, **kwargs):
    """Instantiate the provider for *platform*.

    Raises UnsupportedPlatformError (a ValueError) for unknown platforms.
    """
    plat = parse_platform(platform)
    cls = _registry.get(plat.value)
    if cls is None:
        raise UnsupportedPlatformError(platform)
    return cls(**kwargs)


def _auto_discover():
    package_dir = os.path.dirname(__file__)
    for _, module_name, _ in pkgutil.iter_modules([package_dir]):
        if module_name not in ('base', 'common', 'rate_limiter', '__init__'):
            try:
                importlib.import_module(f'.{module_name}', package=__package__)
            except Exception as e:
                logger.error(f"Failed to load provider module {module_name}: {e}")


_auto_discover()
