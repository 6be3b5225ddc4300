from PySide6.QtWidgets import QWidget, QHBoxLayout, QLabel
from BackEnd.core.clock import format_duration
from FrontEnd.styles.design_tokens import COLORS

class FooterToday(QWidget):
    def __init__(self, today_text="Today: 0m"):
        super().__init__()
        layout = QHBoxLayout()
        layout.addStretch()
        self.label = QLabel(today_text)
        self.label.setObjectName("TodayLabel")
        layout.addWidget(self.label)
        self.setLayout(layout)
        self.setStyleSheet(f"background: {COLORS['footer_bg']}; border-radius: 16px; padding: 8px 24px; color: {COLORS['footer_text']}; font-size: 14px; font-weight: 500;")
    def set_today(self, text):
        self.label.setText(text)
    def show_stats(self, stats):
        """Render today's total, pomodoro count and streak from DerivedStats."""
        self.set_today(
            f"Today: {format_duration(stats.today_total)} · "
            f"{stats.today_sessions} sessions · 🔥 {stats.current_streak} day streak"
        )
