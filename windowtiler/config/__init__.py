"""
windowtiler.config - Configuracion de la aplicacion.

    - settings : Settings (pydantic) y SettingsStore (JSON)
"""

from windowtiler.config.settings import Settings, SettingsStore

__all__ = ["Settings", "SettingsStore"]
