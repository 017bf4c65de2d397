"""
Dashboard usage modes.

A mode selects which canonical widget set a fresh or reset dashboard
starts from. The layout engine only reads it; switching modes happens
outside the engine.
"""

from dataclasses import dataclass
from enum import StrEnum


class Mode(StrEnum):
    """Available dashboard modes."""

    MC_ASSIST = "mc-assist"
    STANDARD = "standard"
    RECORDING = "recording"
    TOURING = "touring"
    PROMOTION = "promotion"
    INSPIRATION = "inspiration"
    STRATEGY = "strategy"


DEFAULT_MODE = Mode.STANDARD


@dataclass(frozen=True)
class ModeInfo:
    id: Mode
    name: str
    description: str


MODES: dict[Mode, ModeInfo] = {
    Mode.MC_ASSIST: ModeInfo(
        Mode.MC_ASSIST, "MC Assist", "Let MC help you choose the best mode"
    ),
    Mode.STANDARD: ModeInfo(
        Mode.STANDARD, "Standard Mode", "All widgets for complete overview"
    ),
    Mode.RECORDING: ModeInfo(
        Mode.RECORDING, "Recording Mode", "Focus on music creation and production"
    ),
    Mode.TOURING: ModeInfo(Mode.TOURING, "Touring Mode", "Manage concerts and tour logistics"),
    Mode.PROMOTION: ModeInfo(
        Mode.PROMOTION, "Promotion Mode", "Campaign planning and social media focus"
    ),
    Mode.INSPIRATION: ModeInfo(
        Mode.INSPIRATION, "Inspiration Mode", "Discovery and creative exploration"
    ),
    Mode.STRATEGY: ModeInfo(Mode.STRATEGY, "Strategy Mode", "Data analysis and planning"),
}


def resolve_mode(mode: Mode | str | None) -> Mode:
    """Normalise a mode value, falling back to standard for unknown names.

    Examples:
        >>> resolve_mode("touring")
        <Mode.TOURING: 'touring'>

        >>> resolve_mode("backstage")
        <Mode.STANDARD: 'standard'>
    """
    if isinstance(mode, Mode):
        return mode
    if mode is None:
        return DEFAULT_MODE
    try:
        return Mode(mode.strip().lower())
    except ValueError:
        return DEFAULT_MODE


def get_mode_info(mode: Mode | str | None) -> ModeInfo:
    return MODES[resolve_mode(mode)]


__all__ = ["DEFAULT_MODE", "MODES", "Mode", "ModeInfo", "get_mode_info", "resolve_mode"]
