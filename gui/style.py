"""
Light Theme Stylesheet

Qt stylesheet for the capture application, built from the GUIConfig palette.
"""

from config import DEFAULT_GUI, GUIConfig


def build_palette(config: GUIConfig = DEFAULT_GUI) -> dict:
    """Color palette derived from the GUI configuration."""
    return {
        "background": config.background_color,
        "surface": config.background_color,
        "background_alt": config.secondary_color,
        "border": config.border_color,
        "text": config.text_color,
        "text_secondary": "#666666",
        "text_disabled": "#999999",
        "accent": config.accent_color,
        "accent_light": "#E3F2FD",
        "accent_hover": "#1E88E5",
        "divider": "#EEEEEE",
    }


def get_stylesheet(config: GUIConfig = DEFAULT_GUI) -> str:
    """Get the complete Qt stylesheet."""
    c = build_palette(config)
    return f"""
    QWidget {{
        background-color: {c["background"]};
        color: {c["text"]};
        font-family: {config.font_family};
        font-size: {config.font_size}pt;
    }}

    QMenuBar {{
        border-bottom: 1px solid {c["border"]};
        padding: 4px 0;
    }}

    QMenuBar::item:selected, QMenu::item:selected {{
        background-color: {c["accent_light"]};
        color: {c["accent"]};
    }}

    QMenu {{
        border: 1px solid {c["border"]};
        padding: 4px;
    }}

    QPushButton {{
        background-color: {c["background_alt"]};
        border: 1px solid {c["border"]};
        border-radius: 4px;
        padding: 6px 14px;
    }}

    QPushButton:hover {{
        border-color: {c["accent"]};
    }}

    QPushButton:disabled {{
        color: {c["text_disabled"]};
    }}

    QPushButton#primaryButton {{
        background-color: {c["accent"]};
        color: white;
        border: none;
        font-weight: 500;
    }}

    QPushButton#primaryButton:hover {{
        background-color: {c["accent_hover"]};
    }}

    QPushButton#primaryButton:disabled {{
        background-color: {c["border"]};
        color: {c["text_disabled"]};
    }}

    QSpinBox, QDoubleSpinBox, QComboBox, QListWidget, QTextEdit {{
        border: 1px solid {c["border"]};
        border-radius: 4px;
        padding: 4px 8px;
        selection-background-color: {c["accent_light"]};
        selection-color: {c["accent"]};
    }}

    QSpinBox:focus, QDoubleSpinBox:focus, QComboBox:focus {{
        border-color: {c["accent"]};
    }}

    QSpinBox:disabled, QDoubleSpinBox:disabled, QComboBox:disabled {{
        background-color: {c["background_alt"]};
        color: {c["text_disabled"]};
    }}

    QGroupBox {{
        border: 1px solid {c["border"]};
        border-radius: 6px;
        margin-top: 14px;
        padding-top: 8px;
        font-weight: 600;
    }}

    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 10px;
        padding: 0 4px;
    }}

    QTabBar::tab {{
        padding: 8px 16px;
        border-bottom: 2px solid transparent;
    }}

    QTabBar::tab:selected {{
        color: {c["accent"]};
        border-bottom-color: {c["accent"]};
    }}

    QProgressBar {{
        border: 1px solid {c["border"]};
        border-radius: 4px;
        text-align: center;
        height: 16px;
    }}

    QProgressBar::chunk {{
        background-color: {c["accent"]};
        border-radius: 3px;
    }}

    QLabel#secondaryLabel {{
        color: {c["text_secondary"]};
    }}

    QStatusBar {{
        border-top: 1px solid {c["divider"]};
    }}
    """


class ScientificStyle:
    """Helper class for applying the theme."""

    @staticmethod
    def apply(app, config: GUIConfig = DEFAULT_GUI) -> None:
        """
        Apply the theme to a QApplication.

        Args:
            app: QApplication instance
            config: GUI configuration providing colors and fonts
        """
        app.setStyleSheet(get_stylesheet(config))
