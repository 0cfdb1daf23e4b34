from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cssctrl.theme import ThemeSnapshot, load_theme

CTRL_SOURCE_SUFFIX = ".ctrl.ts"


@dataclass(frozen=True)
class CtrlConfig:
    theme_path: str | None = None
    output_suffix: str = ".css"
    encoding: str = "utf-8"

    def output_path_for(self, source: Path) -> Path:
        """``button.ctrl.ts`` -> ``button.ctrl.css``; anything else gets the suffix appended."""
        if source.name.endswith(CTRL_SOURCE_SUFFIX):
            stem = source.name[: -len(".ts")]
            return source.with_name(stem + self.output_suffix)
        return source.with_name(source.name + self.output_suffix)

    def load_theme(self) -> ThemeSnapshot:
        if self.theme_path is None:
            return ThemeSnapshot()
        return load_theme(self.theme_path)
