"""
windowtiler.config.settings - Configuracion persistente.

Define los ajustes de la aplicacion y su almacenamiento en JSON:
    window_gap               -> Separacion entre ventanas y bordes (default 4)
    excluded_apps            -> Aplicaciones que nunca aparecen en el catalogo
    min_window_size          -> Ventanas de este tamano o menores se ignoran
    refresh_delay            -> Segundos de espera antes de releer ventanas
    primary_height_reference -> Convertir coordenadas con el alto del
                                display primario (comportamiento heredado)

El gap se lee en cada calculo de layout via current_gap(), nunca se
cachea en el motor. Lo mismo vale para min_window_size() (catalogo) y
primary_height_reference() (motor): un update() rige desde la siguiente
lectura.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from windowtiler.core.errors import PersistenceError
from windowtiler.core.filter import DEFAULT_EXCLUDED_APPS, DEFAULT_MIN_WINDOW_SIZE
from windowtiler.storage.files import read_json, write_json_atomic

log = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"

DEFAULT_GAP = 4.0


# ============================================================================
# Settings
# ============================================================================
class Settings(BaseModel):
    """Ajustes de WindowTiler."""

    window_gap: float = Field(default=DEFAULT_GAP, ge=0)
    excluded_apps: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_EXCLUDED_APPS)
    )
    min_window_size: float = Field(default=DEFAULT_MIN_WINDOW_SIZE, ge=0)
    refresh_delay: float = Field(default=0.3, ge=0)
    primary_height_reference: bool = True

    @field_validator("window_gap", mode="before")
    @classmethod
    def gap_not_negative(cls, v: object) -> object:
        """Un gap negativo se interpreta como 0; otros tipos los valida pydantic."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return max(0.0, float(v))
        return v


# ============================================================================
# SettingsStore
# ============================================================================
class SettingsStore:
    """
    Ajustes en memoria respaldados por un archivo JSON.

    Un archivo inexistente o corrupto produce los valores por defecto.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._settings = self._load()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def settings(self) -> Settings:
        return self._settings

    # ------------------------------------------------------------------
    # Lectura (usada por el motor en cada calculo)
    # ------------------------------------------------------------------
    def current_gap(self) -> float:
        return self._settings.window_gap

    def excluded_apps(self) -> list[str]:
        return list(self._settings.excluded_apps)

    def refresh_delay(self) -> float:
        return self._settings.refresh_delay

    def min_window_size(self) -> float:
        return self._settings.min_window_size

    def primary_height_reference(self) -> bool:
        return self._settings.primary_height_reference

    # ------------------------------------------------------------------
    # Escritura
    # ------------------------------------------------------------------
    def set_gap(self, gap: float) -> bool:
        """Cambia el gap (minimo 0) y persiste. Retorna True si se guardo."""
        self._settings = self._settings.model_copy(update={"window_gap": max(0.0, float(gap))})
        log.info("Gap establecido: %g", self._settings.window_gap)
        return self.save()

    def update(self, **changes: object) -> bool:
        """Aplica cambios validados y persiste."""
        try:
            self._settings = Settings.model_validate(
                {**self._settings.model_dump(), **changes}
            )
        except ValidationError as exc:
            log.warning("Ajustes invalidos ignorados: %s", exc)
            return False
        return self.save()

    def save(self) -> bool:
        try:
            write_json_atomic(self._path, self._settings.model_dump(mode="json"))
        except PersistenceError as exc:
            log.warning("No se pudieron guardar los ajustes: %s", exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Interno
    # ------------------------------------------------------------------
    def _load(self) -> Settings:
        try:
            data = read_json(self._path)
        except PersistenceError as exc:
            log.warning("Ajustes ilegibles, usando valores por defecto: %s", exc)
            return Settings()

        if data is None:
            return Settings()

        try:
            return Settings.model_validate(data)
        except ValidationError as exc:
            log.warning("Ajustes invalidos, usando valores por defecto: %s", exc)
            return Settings()
