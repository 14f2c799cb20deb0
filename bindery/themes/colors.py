# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Color palettes and the default Rich theme used by Bindery's console output.

`OneColors` and `NordColors` expose hex color strings usable directly inside
Rich markup (`f"[{OneColors.DARK_RED}]..."`). `get_nord_theme()` builds the
`rich.theme.Theme` attached to the shared consoles.
"""
from rich.style import Style
from rich.theme import Theme


class ColorsMeta(type):
    """Metaclass that allows `Palette["NAME"]` lookups and lists color names."""

    def __getitem__(cls, key: str) -> str:
        return getattr(cls, key.upper())

    def names(cls) -> list[str]:
        return [
            name
            for name in vars(cls)
            if name.isupper() and isinstance(getattr(cls, name), str)
        ]


class OneColors(metaclass=ColorsMeta):
    BLACK = "#282C34"
    GUTTER_GREY = "#4B5263"
    COMMENT_GREY = "#5C6370"
    WHITE = "#ABB2BF"
    DARK_RED = "#BE5046"
    LIGHT_RED = "#E06C75"
    DARK_YELLOW = "#D19A66"
    LIGHT_YELLOW = "#E5C07B"
    GREEN = "#98C379"
    CYAN = "#56B6C2"
    BLUE = "#61AFEF"
    MAGENTA = "#C678DD"

    BLUE_b = f"bold {BLUE}"
    CYAN_b = f"bold {CYAN}"
    GREEN_b = f"bold {GREEN}"


class NordColors(metaclass=ColorsMeta):
    POLAR_NIGHT_ORIGIN = "#2E3440"
    SNOW_STORM_BRIGHTEST = "#ECEFF4"
    FROST_TEAL = "#8FBCBB"
    FROST_ICE = "#88C0D0"
    FROST_SKY = "#81A1C1"
    FROST_DEEP = "#5E81AC"
    RED = "#BF616A"
    ORANGE = "#D08770"
    YELLOW = "#EBCB8B"
    GREEN = "#A3BE8C"
    PURPLE = "#B48EAD"


def get_nord_theme() -> Theme:
    return Theme(
        {
            "usage": Style(color=NordColors.FROST_ICE, bold=True),
            "command": Style(color=NordColors.FROST_TEAL, bold=True),
            "option": Style(color=NordColors.FROST_SKY),
            "argument": Style(color=NordColors.PURPLE),
            "required": Style(color=NordColors.RED, bold=True),
            "choice": Style(color=NordColors.YELLOW),
            "env": Style(color=NordColors.GREEN),
            "error": Style(color=NordColors.RED, bold=True),
            "hint": Style(color=NordColors.FROST_DEEP, italic=True),
            "logging.level.info": Style(color=NordColors.FROST_ICE),
            "logging.level.warning": Style(color=NordColors.YELLOW),
            "logging.level.error": Style(color=NordColors.RED, bold=True),
        }
    )
