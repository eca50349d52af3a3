"""Load and persist user settings."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from mini_calc.common.logger import logger
from mini_calc.common.models import Settings, Theme
from mini_calc.storage.storage import JsonStorage


SETTINGS_KEY: str = "mini-calc:settings"


class SettingsStore(BaseModel):
    """
    Hold the session's settings and persist every change immediately.

    Settings are loaded once; a missing or malformed record yields the
    defaults (light theme, precision 6).
    """

    model_config = ConfigDict(frozen=True)

    storage: Optional[JsonStorage] = Field(default=None, description="Backing storage, None keeps settings in memory")

    _settings: Settings = PrivateAttr(default_factory=Settings)

    def model_post_init(self, __context) -> None:
        if self.storage is not None:
            self._settings = self._load()

    def _load(self) -> Settings:
        raw = self.storage.load(SETTINGS_KEY, default={})
        if not isinstance(raw, dict):
            logger.warning("⚙️⚠️ Stored settings are not an object, using defaults")
            return Settings()
        try:
            return Settings.model_validate(raw)
        except ValidationError as exc:
            logger.warning(f"⚙️⚠️ Invalid stored settings, using defaults: {exc}")
            return Settings()

    def _save(self) -> None:
        if self.storage is not None:
            self.storage.save(SETTINGS_KEY, self._settings.model_dump(mode="json"))

    @property
    def settings(self) -> Settings:
        """Copy of the current settings."""
        return self._settings.model_copy()

    @property
    def theme(self) -> Theme:
        return self._settings.theme

    @property
    def precision(self) -> int:
        return self._settings.precision

    def set_theme(self, theme: Theme) -> Theme:
        self._settings.theme = Theme(theme)
        self._save()
        return self._settings.theme

    def toggle_theme(self) -> Theme:
        """Switch between light and dark and return the new theme."""
        return self.set_theme(Theme.LIGHT if self._settings.theme is Theme.DARK else Theme.DARK)

    def set_precision(self, precision: int) -> int:
        """
        Change the display precision, clamped into [0, 12].

        :param int precision: Requested number of fractional digits

        :return: Precision actually stored
        :rtype: int
        """
        self._settings.precision = precision
        self._save()
        return self._settings.precision
