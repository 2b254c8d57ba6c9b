"""Settings for dialogue hosts.

Defaults live in skein.conf.global_settings. A host overrides them by putting
upper-case names in its own settings module, found through the
SKEIN_SETTINGS_MODULE environment variable (``settings`` when unset):

    # settings.py next to the game or tool that runs the dialogue
    DIALOGUE_START_NODE = "Intro"
    DIALOGUE_MAX_SILENT_STEPS = 500

Interpreters, runners and the terminal player read the values through the
``settings`` proxy when an explicit argument is not given:

    from skein.conf import settings

    settings.DIALOGUE_START_NODE  # "Intro"
"""

import importlib
import logging
import os
from typing import Any

from skein.conf import global_settings

logger = logging.getLogger(__name__)

SETTINGS_MODULE_VARIABLE = "SKEIN_SETTINGS_MODULE"
"""Environment variable naming the host's settings module."""


def _public_names(module: object) -> list[str]:
    return [name for name in dir(module) if name.isupper()]


class LazySettings:
    """Proxy that resolves settings the first time one is read.

    Resolution order, later entries winning:
    1. skein.conf.global_settings
    2. the module named by SKEIN_SETTINGS_MODULE, when it can be imported
    3. values passed to configure() or assigned on the proxy
    """

    def __init__(self) -> None:
        """Create an unresolved proxy."""
        self._wrapped: Settings | None = None

    def _setup(self) -> None:
        module_name = os.environ.get(SETTINGS_MODULE_VARIABLE, "settings")
        self._wrapped = Settings()
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            logger.debug("LazySettings: No settings module '%s', using defaults", module_name)
            return
        for name in _public_names(module):
            setattr(self._wrapped, name, getattr(module, name))
        logger.debug("LazySettings: Loaded overrides from '%s'", module_name)

    def _resolved(self) -> "Settings":
        if self._wrapped is None:
            self._setup()
        if self._wrapped is None:
            msg = "Dialogue settings could not be loaded"
            raise RuntimeError(msg)
        return self._wrapped

    def __getattr__(self, name: str) -> Any:  # noqa: ANN401
        """Read a setting, resolving the proxy first if needed."""
        return getattr(self._resolved(), name)

    def __setattr__(self, name: str, value: Any) -> None:  # noqa: ANN401
        """Override a single setting."""
        if name == "_wrapped":
            self.__dict__["_wrapped"] = value
            return
        setattr(self._resolved(), name, value)

    def configure(self, **options: Any) -> None:  # noqa: ANN401
        """Override settings without a settings module.

        The host settings module is skipped when configure() runs first, which
        keeps tests independent of whatever settings.py is importable.

        Example:
            settings.configure(
                DIALOGUE_START_NODE="Intro",
                DIALOGUE_EXTRACT_CHARACTER=False,
            )
        """
        if self._wrapped is None:
            self._wrapped = Settings()
        for name, value in options.items():
            setattr(self._wrapped, name, value)

    def is_configured(self) -> bool:
        """Check whether settings have been resolved or configured."""
        return self._wrapped is not None


class Settings:
    """Plain holder for resolved settings, seeded from global_settings."""

    def __init__(self) -> None:
        """Copy every default from global_settings."""
        for name in _public_names(global_settings):
            setattr(self, name, getattr(global_settings, name))


settings = LazySettings()

__all__ = ["SETTINGS_MODULE_VARIABLE", "LazySettings", "Settings", "global_settings", "settings"]
