import logging
import sqlite3
from dataclasses import replace

from PySide6.QtWidgets import (
	QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QPushButton, QListWidget,
	QStackedWidget, QListWidgetItem, QTableWidget, QTableWidgetItem, QComboBox, QSpinBox,
	QCheckBox, QFormLayout, QInputDialog, QMessageBox, QAbstractItemView
)
from PySide6.QtCore import Qt, QTimer
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure

from BackEnd.core.clock import format_duration
from BackEnd.models.timer_state import (
	TimerPhase, TimerStatus, DURATION_RANGE, INTERVAL_RANGE
)
from FrontEnd.components.footer_today import FooterToday
from FrontEnd.styles.design_tokens import COLORS, SPACING, stylesheet

logger = logging.getLogger(__name__)

TOAST_MS = 5000


class MainWindow(QMainWindow):
	def __init__(self, controller, library):
		super().__init__()
		self.controller = controller
		self.timer = controller.timer
		self.library = library
		self.setWindowTitle("StudyFlow")
		self.resize(900, 700)
		self.setStyleSheet(stylesheet())

		# --- Sidebar + pages ---
		self.sidebar = QListWidget()
		self.sidebar.setFixedWidth(180)
		self.sidebar.setSpacing(8)
		for name in ("Timer", "Dashboard", "History", "Settings"):
			self.sidebar.addItem(QListWidgetItem(name))

		self.pages = QStackedWidget()
		self.pages.addWidget(self._build_timer_tab())
		self.pages.addWidget(self._build_stats_tab())
		self.pages.addWidget(self._build_history_tab())
		self.pages.addWidget(self._build_settings_tab())
		self.sidebar.currentRowChanged.connect(self.pages.setCurrentIndex)
		self.sidebar.setCurrentRow(0)

		central = QWidget()
		row = QHBoxLayout(central)
		row.setContentsMargins(0, 0, 0, 0)
		row.addWidget(self.sidebar)
		row.addWidget(self.pages, 1)
		self.setCentralWidget(central)

		# Timer signals
		self.timer.remaining_changed.connect(lambda _: self._render_timer())
		self.timer.state_changed.connect(lambda _: self._render_timer())
		self.timer.phase_changed.connect(lambda _: self._render_timer())
		self.timer.walk_reminder.connect(self._show_toast)
		self.controller.stats_changed.connect(self._on_stats)
		self.library.tags_changed.connect(self._reload_tags)
		self.library.projects_changed.connect(self._reload_projects)
		self.library.delete_mode_changed.connect(self._on_delete_mode)

		self._reload_tags()
		self._reload_projects()
		self._render_timer()
		self.controller.refresh()

	# --- Timer page ---

	def _build_timer_tab(self):
		w = QWidget()
		outer = QVBoxLayout(w)
		outer.setContentsMargins(SPACING['xl'], SPACING['xl'], SPACING['xl'], SPACING['xl'])

		phase_row = QHBoxLayout()
		self.phase_buttons = {}
		for phase in TimerPhase:
			btn = QPushButton(phase.label)
			btn.setCheckable(True)
			btn.clicked.connect(lambda _=False, p=phase: self.timer.set_phase(p))
			self.phase_buttons[phase] = btn
			phase_row.addWidget(btn)
		outer.addLayout(phase_row)
		outer.addStretch()

		self.phase_label = QLabel()
		self.phase_label.setObjectName("PhaseLabel")
		self.phase_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		outer.addWidget(self.phase_label)

		# Duration adjuster (visible when idle)
		adjust_row = QHBoxLayout()
		self.minus_btn = QPushButton("−5")
		self.plus_btn = QPushButton("+5")
		self.minus_btn.clicked.connect(lambda: self.timer.adjust_duration(-5))
		self.plus_btn.clicked.connect(lambda: self.timer.adjust_duration(5))
		self.timer_label = QLabel("25:00")
		self.timer_label.setObjectName("TimerLabel")
		self.timer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		adjust_row.addWidget(self.minus_btn)
		adjust_row.addWidget(self.timer_label, 1)
		adjust_row.addWidget(self.plus_btn)
		outer.addLayout(adjust_row)

		self.pomo_label = QLabel()
		self.pomo_label.setObjectName("Muted")
		self.pomo_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		outer.addWidget(self.pomo_label)

		btn_layout = QHBoxLayout()
		self.reset_btn = QPushButton("Reset")
		self.start_pause_btn = QPushButton("Start")
		self.start_pause_btn.setObjectName("StartBtn")
		self.skip_btn = QPushButton("Skip")
		self.reset_btn.clicked.connect(self.timer.reset)
		self.start_pause_btn.clicked.connect(self.timer.toggle)
		self.skip_btn.clicked.connect(self.timer.skip)
		for btn in (self.reset_btn, self.start_pause_btn, self.skip_btn):
			btn.setMinimumHeight(48)
			btn_layout.addWidget(btn)
		outer.addLayout(btn_layout)

		# Tag and project pickers
		pick_row = QHBoxLayout()
		self.tag_combo = QComboBox()
		self.tag_combo.activated.connect(self._on_tag_chosen)
		add_tag_btn = QPushButton("+ Tag")
		add_tag_btn.clicked.connect(self._add_tag)
		self.delete_mode_btn = QPushButton("Edit Tags")
		self.delete_mode_btn.clicked.connect(self.library.toggle_delete_mode)
		self.delete_tag_btn = QPushButton("Delete Tag")
		self.delete_tag_btn.setVisible(False)
		self.delete_tag_btn.clicked.connect(self._delete_tag)
		self.project_combo = QComboBox()
		self.project_combo.activated.connect(self._on_project_chosen)
		add_project_btn = QPushButton("+ Project")
		add_project_btn.clicked.connect(self._add_project)
		for widget in (self.tag_combo, add_tag_btn, self.delete_mode_btn, self.delete_tag_btn,
				self.project_combo, add_project_btn):
			pick_row.addWidget(widget)
		outer.addLayout(pick_row)

		self.toast = QLabel()
		self.toast.setAlignment(Qt.AlignmentFlag.AlignCenter)
		self.toast.setStyleSheet(f"color: {COLORS['success']}; font-weight: 600;")
		self.toast.setVisible(False)
		outer.addWidget(self.toast)
		outer.addStretch()

		self.footer_today = FooterToday()
		outer.addWidget(self.footer_today)
		return w

	def _render_timer(self):
		state = self.timer.snapshot()
		self.timer_label.setText(state.time_string)
		self.phase_label.setText(state.phase_label)
		self.pomo_label.setText(f"Pomodoros: {state.completed_pomodoros}")
		for phase, btn in self.phase_buttons.items():
			btn.setChecked(phase == state.phase)
		idle = state.status == TimerStatus.IDLE
		self.minus_btn.setVisible(idle)
		self.plus_btn.setVisible(idle)
		self.minus_btn.setEnabled(self.timer.can_decrease)
		self.plus_btn.setEnabled(self.timer.can_increase)
		if state.status == TimerStatus.RUNNING:
			self.start_pause_btn.setText("Pause")
		elif state.status == TimerStatus.PAUSED:
			self.start_pause_btn.setText("Resume")
		else:
			self.start_pause_btn.setText("Start")

	def _show_toast(self, message):
		self.toast.setText(f"Session Complete! {message}")
		self.toast.setVisible(True)
		QTimer.singleShot(TOAST_MS, lambda: self.toast.setVisible(False))

	# --- Tags / projects ---

	def _reload_tags(self):
		self._tags = self._safe(self.library.tags, [])
		self.tag_combo.clear()
		for tag in self._tags:
			self.tag_combo.addItem(tag.name)
		index = self.tag_combo.findText(self.library.subject_name)
		if index >= 0:
			self.tag_combo.setCurrentIndex(index)
		self._reload_history_filter()

	def _reload_projects(self):
		self._projects = self._safe(self.library.projects, [])
		self.project_combo.clear()
		self.project_combo.addItem("No Project")
		self.project_filter_combo.clear()
		self.project_filter_combo.addItem("Select Project")
		for project in self._projects:
			self.project_combo.addItem(project.name)
			self.project_filter_combo.addItem(project.name)
		if self.library.project_name:
			self.project_combo.setCurrentIndex(max(0, self.project_combo.findText(self.library.project_name)))
		self.project_filter_combo.setCurrentIndex(
			max(0, self.project_filter_combo.findText(self.controller.project_filter))
		)

	def _on_tag_chosen(self, index):
		if 0 <= index < len(self._tags):
			tag = self._tags[index]
			self.library.select_subject(tag.name, tag.color)

	def _on_project_chosen(self, index):
		if index <= 0:
			self.library.select_project(None)
		else:
			project = self._projects[index - 1]
			self.library.select_project(project.name, project.color)

	def _add_tag(self):
		name, ok = QInputDialog.getText(self, "New Tag", "Tag name (e.g. DSA, Physics, Reading)")
		if ok:
			self._add_named(self.library.add_tag, name)

	def _add_project(self):
		name, ok = QInputDialog.getText(self, "New Project", "Project name")
		if ok:
			self._add_named(self.library.add_project, name)

	def _add_named(self, add, name):
		try:
			add(name)
		except (ValueError, sqlite3.Error) as e:
			QMessageBox.warning(self, "StudyFlow", str(e))

	def _delete_tag(self):
		name = self.tag_combo.currentText()
		if name:
			self.library.delete_tag(name)

	def _on_delete_mode(self, enabled):
		self.delete_tag_btn.setVisible(enabled)
		self.delete_mode_btn.setText("Done" if enabled else "Edit Tags")

	# --- Dashboard ---

	def _build_stats_tab(self):
		w = QWidget()
		layout = QVBoxLayout(w)
		layout.setContentsMargins(SPACING['xl'], SPACING['xl'], SPACING['xl'], SPACING['xl'])

		cards = QGridLayout()
		self.stat_values = {}
		for i, title in enumerate(("Today", "This Week", "Sessions", "Streak")):
			title_label = QLabel(title)
			title_label.setObjectName("Muted")
			value = QLabel("0m")
			value.setObjectName("StatValue")
			cards.addWidget(title_label, 0, i)
			cards.addWidget(value, 1, i)
			self.stat_values[title] = value
		layout.addLayout(cards)

		self.figure = Figure(figsize=(6, 2.6))
		self.canvas = FigureCanvas(self.figure)
		layout.addWidget(self.canvas)

		self.subject_list = QListWidget()
		layout.addWidget(QLabel("Today by Tag"))
		layout.addWidget(self.subject_list)

		project_row = QHBoxLayout()
		project_row.addWidget(QLabel("Project Breakdown"))
		project_row.addStretch()
		self.project_filter_combo = QComboBox()
		self.project_filter_combo.activated.connect(self._on_project_filter)
		project_row.addWidget(self.project_filter_combo)
		layout.addLayout(project_row)
		self.project_list = QListWidget()
		layout.addWidget(self.project_list)
		return w

	def _on_project_filter(self, index):
		name = self.project_filter_combo.itemText(index) if index > 0 else ""
		self.controller.set_project_filter(name)

	def _on_stats(self, stats):
		self.stat_values["Today"].setText(format_duration(stats.today_total))
		self.stat_values["This Week"].setText(format_duration(stats.week_total))
		self.stat_values["Sessions"].setText(str(stats.total_sessions))
		self.stat_values["Streak"].setText(f"{stats.current_streak} days")
		self.footer_today.show_stats(stats)

		self.subject_list.clear()
		for entry in stats.subject_breakdown:
			self.subject_list.addItem(f"●  {entry.name}   {format_duration(entry.duration)}")

		self.project_list.clear()
		if not stats.project_filter:
			self.project_list.addItem("Select a project to see tag distribution")
		elif not stats.project_tag_breakdown:
			self.project_list.addItem("No sessions for this project yet")
		for entry in stats.project_tag_breakdown:
			self.project_list.addItem(
				f"●  {entry.name}   {stats.project_percentage(entry)}%   {format_duration(entry.duration)}"
			)

		self._update_bar_chart(stats)
		self._refresh_history()

	def _update_bar_chart(self, stats):
		x = [d.day.strftime("%a") for d in stats.daily_totals]
		y = [d.duration / 3600 for d in stats.daily_totals]

		self.figure.clear()
		self.figure.patch.set_facecolor(COLORS['background'])
		ax = self.figure.add_subplot(111)
		ax.set_facecolor(COLORS['surface'])
		bars = ax.bar(x, y, color=COLORS['accent'], alpha=0.9)
		for bar, value in zip(bars, y):
			if value > 0:
				ax.text(bar.get_x() + bar.get_width()/2, bar.get_height(),
					f'{value:.1f}h', ha='center', va='bottom', fontsize=8, color=COLORS['text_secondary'])
		ax.set_ylabel("Hours", color=COLORS['text_secondary'])
		ax.set_title("Last 7 Days", color=COLORS['text'])
		ax.set_ylim(bottom=0)
		ax.tick_params(axis='both', colors=COLORS['text_secondary'], labelsize=9)
		for spine in ['top', 'right']:
			ax.spines[spine].set_visible(False)
		self.figure.tight_layout()
		self.canvas.draw()

	# --- History ---

	def _build_history_tab(self):
		w = QWidget()
		layout = QVBoxLayout(w)
		layout.setAlignment(Qt.AlignmentFlag.AlignTop)
		layout.setContentsMargins(SPACING['xl'], SPACING['xl'], SPACING['xl'], SPACING['xl'])

		top = QHBoxLayout()
		self.history_count = QLabel("0 sessions")
		self.history_count.setObjectName("Muted")
		self.history_filter = QComboBox()
		self.history_filter.activated.connect(lambda _: self._refresh_history())
		delete_btn = QPushButton("Delete Selected")
		delete_btn.clicked.connect(self._delete_selected_session)
		top.addWidget(self.history_filter)
		top.addStretch()
		top.addWidget(self.history_count)
		top.addWidget(delete_btn)
		layout.addLayout(top)

		self.history_table = QTableWidget(0, 5)
		self.history_table.setHorizontalHeaderLabels(["Date", "Time", "Tag", "Project", "Duration"])
		self.history_table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
		self.history_table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
		layout.addWidget(self.history_table)
		return w

	def _reload_history_filter(self):
		current = self.history_filter.currentText()
		self.history_filter.clear()
		self.history_filter.addItem("All")
		for tag in self._tags:
			self.history_filter.addItem(tag.name)
		self.history_filter.setCurrentIndex(max(0, self.history_filter.findText(current)))

	def _refresh_history(self):
		subject = self.history_filter.currentText()
		groups = self.controller.history(None if subject in ("", "All") else subject)
		rows = [s for _, day_sessions in groups for s in day_sessions]
		self.history_count.setText(f"{len(rows)} sessions")
		self.history_table.setRowCount(len(rows))
		for row, sess in enumerate(rows):
			date_item = QTableWidgetItem(sess.start_time.strftime("%b %d, %Y"))
			date_item.setData(Qt.ItemDataRole.UserRole, sess.id)
			self.history_table.setItem(row, 0, date_item)
			self.history_table.setItem(row, 1, QTableWidgetItem(sess.time_range))
			self.history_table.setItem(row, 2, QTableWidgetItem(sess.subject_name))
			self.history_table.setItem(row, 3, QTableWidgetItem(sess.project_name or ""))
			self.history_table.setItem(row, 4, QTableWidgetItem(sess.formatted_duration))

	def _delete_selected_session(self):
		row = self.history_table.currentRow()
		if row < 0:
			return
		session_id = self.history_table.item(row, 0).data(Qt.ItemDataRole.UserRole)
		self.controller.delete_session(session_id)

	# --- Settings ---

	def _build_settings_tab(self):
		w = QWidget()
		form = QFormLayout(w)
		form.setContentsMargins(SPACING['xl'], SPACING['xl'], SPACING['xl'], SPACING['xl'])
		self.focus_spin = self._spin(DURATION_RANGE)
		self.short_spin = self._spin(DURATION_RANGE)
		self.long_spin = self._spin(DURATION_RANGE)
		self.interval_spin = self._spin(INTERVAL_RANGE)
		self.sound_check = QCheckBox("Play sound")
		self.notify_check = QCheckBox("Show notifications")
		form.addRow("Focus (min)", self.focus_spin)
		form.addRow("Short break (min)", self.short_spin)
		form.addRow("Long break (min)", self.long_spin)
		form.addRow("Long break every", self.interval_spin)
		form.addRow(self.sound_check)
		form.addRow(self.notify_check)
		self._sync_settings(self.timer.config)
		for spin in (self.focus_spin, self.short_spin, self.long_spin, self.interval_spin):
			spin.valueChanged.connect(self._apply_settings)
		for check in (self.sound_check, self.notify_check):
			check.toggled.connect(self._apply_settings)
		self.timer.config_changed.connect(self._sync_settings)
		return w

	def _spin(self, bounds):
		spin = QSpinBox()
		spin.setRange(*bounds)
		return spin

	def _settings_widgets(self):
		return (
			(self.focus_spin, "focus_duration", 60),
			(self.short_spin, "short_break_duration", 60),
			(self.long_spin, "long_break_duration", 60),
			(self.interval_spin, "long_break_interval", 1),
		)

	def _sync_settings(self, cfg):
		"""Show `cfg` in the settings form without writing it back."""
		inputs = [spin for spin, _, _ in self._settings_widgets()] + [self.sound_check, self.notify_check]
		for widget in inputs:
			widget.blockSignals(True)
		try:
			for spin, field, unit in self._settings_widgets():
				spin.setValue(getattr(cfg, field) // unit)
			self.sound_check.setChecked(cfg.sound_enabled)
			self.notify_check.setChecked(cfg.notifications_enabled)
		finally:
			for widget in inputs:
				widget.blockSignals(False)

	def _apply_settings(self, *_):
		# spins clamp what they show, so only fields the user moved are written
		cfg = self.timer.config
		changes = {
			"sound_enabled": self.sound_check.isChecked(),
			"notifications_enabled": self.notify_check.isChecked(),
		}
		for spin, field, unit in self._settings_widgets():
			shown = max(spin.minimum(), min(spin.maximum(), getattr(cfg, field) // unit))
			if spin.value() != shown:
				changes[field] = spin.value() * unit
		self.timer.update_config(replace(cfg, **changes))

	def _safe(self, load, default):
		try:
			return load()
		except sqlite3.Error as e:
			logger.warning("Could not load from the session store: %s", e)
			return default
