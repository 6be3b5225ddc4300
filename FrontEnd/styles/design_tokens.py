# Design tokens for StudyFlow UI

COLORS = {
    'background': '#0F0F1A',
    'surface': '#1A1A2E',
    'surface_light': '#242440',
    'accent': '#7C5CFC',
    'accent_secondary': '#A855F7',
    'success': '#00C9A7',
    'warning': '#FFA94D',
    'danger': '#FF6B6B',
    'text': '#FFFFFF',
    'text_secondary': '#A0A0B8',
    'text_muted': '#6B6B80',
    'focus': '#7C5CFC',
    'break': '#00C9A7',
    'footer_bg': '#1A1A2E',
    'footer_text': '#A0A0B8',
}

FONTS = {
    'family': 'Inter, Manrope, Arial, sans-serif',
    'timer_size': 72,
    'timer_weight': 'bold',
    'button_size': 16,
    'text': 14,
    'text_strong': 22,
}

SPACING = {
    'sm': 8,
    'md': 16,
    'lg': 24,
    'xl': 32,
    'radius': 16,
}


def stylesheet():
    """Application-wide QSS built from the tokens."""
    return f"""
    QWidget {{ background: {COLORS['background']}; color: {COLORS['text']};
        font-family: {FONTS['family']}; font-size: {FONTS['text']}px; }}
    QListWidget {{ background: {COLORS['surface']}; border: none; }}
    QListWidget::item:selected {{ background: {COLORS['surface_light']}; color: {COLORS['text']}; }}
    QPushButton {{ background: {COLORS['surface_light']}; border: none; border-radius: 10px;
        padding: 8px 16px; font-size: {FONTS['button_size']}px; }}
    QPushButton:disabled {{ color: {COLORS['text_muted']}; }}
    QPushButton#StartBtn {{ background: {COLORS['accent']}; font-weight: 600; }}
    QLabel#TimerLabel {{ font-size: {FONTS['timer_size']}px; font-weight: {FONTS['timer_weight']}; }}
    QLabel#PhaseLabel {{ color: {COLORS['text_secondary']}; font-size: {FONTS['text_strong']}px; }}
    QLabel#StatValue {{ font-size: {FONTS['text_strong']}px; font-weight: 600; }}
    QLabel#Muted {{ color: {COLORS['text_muted']}; }}
    """
