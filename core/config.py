"""
Scan configuration: every tunable of the selector, tracker, capture producer,
preprocessor and recognizer, with the defaults the app ships with.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from core.errors import ConfigError

# COCO labels that are treated as flat, document-like objects.
DEFAULT_DOCUMENT_CLASSES: tuple[str, ...] = (
    "book",
    "cell phone",
    "laptop",
    "handbag",
    "suitcase",
)

STABILITY_MODES = ("soft_decay", "reset")


@dataclass(frozen=True)
class ScanConfig:
    """Immutable scan settings. Build from a settings dict with from_settings()."""

    # Candidate selection
    document_score_threshold: float = 0.5
    prominent_score_threshold: float = 0.4
    area_ratio_threshold: float = 0.15
    centered_inset: tuple[float, float] = (0.2, 0.8)
    document_classes: tuple[str, ...] = DEFAULT_DOCUMENT_CLASSES
    person_label: str = "person"

    # Stability tracking
    stability_threshold: int = 20  # ~0.7s at 30fps
    relative_movement_limit: float = 0.02  # fraction of frame width
    ema_alpha: float = 0.3
    stability_mode: str = "soft_decay"

    # Capture
    crop_padding: int = 30
    encode_quality: float = 0.9

    # Preprocessing / OCR
    contrast_factor: float = 1.2
    ocr_language: str = "eng"

    @property
    def jpeg_quality(self) -> int:
        """encode_quality mapped onto OpenCV's 0-100 JPEG scale."""
        return int(round(self.encode_quality * 100))

    def validate(self) -> "ScanConfig":
        """Raise ConfigError on out-of-range values; return self for chaining."""
        for name in ("document_score_threshold", "prominent_score_threshold", "area_ratio_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(name, value, "must be within [0, 1]")
        lo, hi = self.centered_inset
        if not 0.0 <= lo < hi <= 1.0:
            raise ConfigError("centered_inset", self.centered_inset, "expected 0 <= low < high <= 1")
        if self.stability_threshold < 1:
            raise ConfigError("stability_threshold", self.stability_threshold, "must be >= 1")
        if self.relative_movement_limit < 0:
            raise ConfigError("relative_movement_limit", self.relative_movement_limit, "must be >= 0")
        if not 0.0 < self.ema_alpha <= 1.0:
            raise ConfigError("ema_alpha", self.ema_alpha, "must be within (0, 1]")
        if self.stability_mode not in STABILITY_MODES:
            raise ConfigError("stability_mode", self.stability_mode, f"one of {STABILITY_MODES}")
        if self.crop_padding < 0:
            raise ConfigError("crop_padding", self.crop_padding, "must be >= 0")
        if not 0.0 < self.encode_quality <= 1.0:
            raise ConfigError("encode_quality", self.encode_quality, "must be within (0, 1]")
        if not -255.0 < self.contrast_factor < 259.0:
            raise ConfigError("contrast_factor", self.contrast_factor, "must be within (-255, 259)")
        return self

    @classmethod
    def from_settings(cls, settings: dict[str, Any] | None) -> "ScanConfig":
        """
        Build a config from a plain settings dict (e.g. from the settings form).
        Unknown keys are ignored; values are coerced to the field's type.
        """
        base = cls()
        if not settings:
            return base
        overrides: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in settings:
                continue
            current = getattr(base, f.name)
            raw = settings[f.name]
            if isinstance(current, bool):
                overrides[f.name] = bool(raw)
            elif isinstance(current, int):
                overrides[f.name] = int(raw)
            elif isinstance(current, float):
                overrides[f.name] = float(raw)
            elif isinstance(current, tuple):
                # A bare string is one item, not a sequence of characters
                overrides[f.name] = (raw,) if isinstance(raw, str) else tuple(raw)
            else:
                overrides[f.name] = str(raw)
        # Individual inset bounds, as edited by spin boxes
        if "centered_inset_low" in settings or "centered_inset_high" in settings:
            lo, hi = overrides.get("centered_inset", base.centered_inset)
            overrides["centered_inset"] = (
                float(settings.get("centered_inset_low", lo)),
                float(settings.get("centered_inset_high", hi)),
            )
        return replace(base, **overrides).validate()

    def to_settings(self) -> dict[str, Any]:
        out = asdict(self)
        out["centered_inset"] = list(self.centered_inset)
        out["document_classes"] = list(self.document_classes)
        return out
