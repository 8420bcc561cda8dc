from dataclasses import dataclass


@dataclass(frozen=True)
class EcoStatTheme:
    """Colour palette applied across report tables and messages."""

    header_style: str
    label_style: str
    value_style: str
    co2_style: str
    count_style: str
    info_style: str
    warning_style: str
    accent_style: str
    green_style: str
    amber_style: str
    red_style: str
    row_styles: tuple[str, ...] | None = None

    def grade_style(self, level: int) -> str:
        """Return the style for an impact level between 1 and 10."""
        if level <= 3:
            return self.green_style
        if level <= 6:
            return self.amber_style
        return self.red_style


THEMES: dict[str, EcoStatTheme] = {
    "default": EcoStatTheme(
        header_style="bold cyan",
        label_style="white",
        value_style="white",
        co2_style="bold green",
        count_style="yellow",
        info_style="bold white",
        warning_style="yellow",
        accent_style="bold",
        green_style="bold green",
        amber_style="bold yellow",
        red_style="bold red",
        row_styles=None,
    ),
    "mono": EcoStatTheme(
        header_style="bold white",
        label_style="white",
        value_style="white",
        co2_style="bold white",
        count_style="white",
        info_style="bold white",
        warning_style="white",
        accent_style="bold white",
        green_style="bold white",
        amber_style="bold white",
        red_style="bold white",
        row_styles=None,
    ),
    "monokai": EcoStatTheme(
        header_style="bold #66D9EF",
        label_style="#F8F8F2",
        value_style="#E6DB74",
        co2_style="bold #A6E22E",
        count_style="#FD971F",
        info_style="#F8F8F2",
        warning_style="#F92672",
        accent_style="bold #F92672",
        green_style="bold #A6E22E",
        amber_style="bold #FD971F",
        red_style="bold #F92672",
        row_styles=None,
    ),
    "dracula": EcoStatTheme(
        header_style="bold #BD93F9",
        label_style="#F8F8F2",
        value_style="#F1FA8C",
        co2_style="bold #50FA7B",
        count_style="#FFB86C",
        info_style="#6272A4",
        warning_style="#FF5555",
        accent_style="bold #FF79C6",
        green_style="bold #50FA7B",
        amber_style="bold #FFB86C",
        red_style="bold #FF5555",
        row_styles=None,
    ),
    "ayu": EcoStatTheme(
        header_style="bold #FFCC66",
        label_style="#CCCAC2",
        value_style="#FFAD66",
        co2_style="bold #87D96C",
        count_style="#FFD173",
        info_style="#707A8C",
        warning_style="#FF6666",
        accent_style="bold #FFCC66",
        green_style="bold #87D96C",
        amber_style="bold #FFD173",
        red_style="bold #FF6666",
        row_styles=("none", "dim"),
    ),
}

DEFAULT_THEME = "dracula"


def _get_theme_names() -> tuple[str, ...]:
    """Return available theme identifiers for CLI option hints."""
    return tuple(sorted(THEMES))


AVAILABLE_THEMES = _get_theme_names()
