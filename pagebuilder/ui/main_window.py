"""Main application window for the page builder."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from PyQt6 import QtCore, QtGui, QtWidgets
from PyQt6.QtWebEngineWidgets import QWebEngineView

from ..core import generator, storage
from ..core.editor import EditorSession
from ..core.exceptions import DocumentFormatError
from ..core.models import WIDGET_TYPES, NodeKind, PageDocument
from ..core.organizer import OrganizedPanel, section_title
from ..core.schema import TABS, describe
from ..core.tree import MutationResult
from ..core.ui_state import EditorUIState, UIStateStore


APP_TITLE = "PyQt Page Builder"
NODE_ID_ROLE = QtCore.Qt.ItemDataRole.UserRole


class CollapsibleSection(QtWidgets.QWidget):
    """Header button plus a body that can be folded away."""

    toggled = QtCore.pyqtSignal(str, bool)

    def __init__(self, key: str, title: str, is_open: bool, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.key = key
        self.header = QtWidgets.QToolButton(self)
        self.header.setText(title)
        self.header.setCheckable(True)
        self.header.setChecked(is_open)
        self.header.setToolButtonStyle(QtCore.Qt.ToolButtonStyle.ToolButtonTextBesideIcon)
        self.header.setSizePolicy(QtWidgets.QSizePolicy.Policy.Expanding, QtWidgets.QSizePolicy.Policy.Fixed)
        self.body = QtWidgets.QWidget(self)
        self.form = QtWidgets.QFormLayout(self.body)
        self.form.setContentsMargins(12, 4, 4, 8)

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(2)
        layout.addWidget(self.header)
        layout.addWidget(self.body)

        self.header.toggled.connect(self._on_toggled)
        self._apply(is_open)

    def _apply(self, is_open: bool) -> None:
        arrow = QtCore.Qt.ArrowType.DownArrow if is_open else QtCore.Qt.ArrowType.RightArrow
        self.header.setArrowType(arrow)
        self.body.setVisible(is_open)

    def _on_toggled(self, checked: bool) -> None:
        self._apply(checked)
        self.toggled.emit(self.key, checked)


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle(APP_TITLE)
        self.resize(1360, 840)

        self.session = EditorSession(ui_state=EditorUIState.load(UIStateStore()))
        self.document_path: Optional[Path] = None
        self._preview_tmp: Optional[str] = None
        self._panel_signature: Optional[Tuple[str, Tuple[Tuple[str, Tuple[str, ...]], ...]]] = None
        self._debounce = QtCore.QTimer(self)
        self._debounce.setInterval(400)
        self._debounce.setSingleShot(True)
        self._debounce.timeout.connect(self.update_preview)

        self._build_ui()
        self._build_menu()
        self._bind_events()

        self.new_document()

    # ------------------------------------------------------------------ UI --
    def _build_ui(self) -> None:
        splitter = QtWidgets.QSplitter(self)
        splitter.setOrientation(QtCore.Qt.Orientation.Horizontal)
        self.setCentralWidget(splitter)

        # Structure panel
        left_panel = QtWidgets.QWidget(self)
        left_layout = QtWidgets.QVBoxLayout(left_panel)
        left_layout.setContentsMargins(6, 6, 6, 6)
        left_layout.setSpacing(6)

        self.structure = QtWidgets.QTreeWidget(left_panel)
        self.structure.setHeaderHidden(True)
        self.structure.setSelectionMode(QtWidgets.QAbstractItemView.SelectionMode.SingleSelection)

        self.btn_add_section = QtWidgets.QPushButton("Add Section", left_panel)
        self.btn_add_inner = QtWidgets.QPushButton("Add Inner Section", left_panel)
        self.btn_col_left = QtWidgets.QPushButton("Column Left", left_panel)
        self.btn_col_right = QtWidgets.QPushButton("Column Right", left_panel)
        self.widget_picker = QtWidgets.QComboBox(left_panel)
        self.widget_picker.addItems(list(WIDGET_TYPES))
        self.btn_add_widget = QtWidgets.QPushButton("Add Widget", left_panel)
        self.btn_move_up = QtWidgets.QPushButton("Move Up", left_panel)
        self.btn_move_down = QtWidgets.QPushButton("Move Down", left_panel)
        self.btn_remove = QtWidgets.QPushButton("Remove", left_panel)

        grid = QtWidgets.QGridLayout()
        grid.addWidget(self.btn_add_section, 0, 0)
        grid.addWidget(self.btn_add_inner, 0, 1)
        grid.addWidget(self.btn_col_left, 1, 0)
        grid.addWidget(self.btn_col_right, 1, 1)
        grid.addWidget(self.widget_picker, 2, 0)
        grid.addWidget(self.btn_add_widget, 2, 1)
        grid.addWidget(self.btn_move_up, 3, 0)
        grid.addWidget(self.btn_move_down, 3, 1)
        grid.addWidget(self.btn_remove, 4, 0, 1, 2)

        left_layout.addWidget(QtWidgets.QLabel("Structure", left_panel))
        left_layout.addWidget(self.structure, 1)
        left_layout.addLayout(grid)

        # Inspector
        inspector = QtWidgets.QWidget(self)
        inspector_layout = QtWidgets.QVBoxLayout(inspector)
        inspector_layout.setContentsMargins(6, 6, 6, 6)
        inspector_layout.setSpacing(6)

        tab_row = QtWidgets.QHBoxLayout()
        self.tab_buttons: Dict[str, QtWidgets.QPushButton] = {}
        self.tab_group = QtWidgets.QButtonGroup(inspector)
        self.tab_group.setExclusive(True)
        for tab in TABS:
            button = QtWidgets.QPushButton(tab.title(), inspector)
            button.setCheckable(True)
            self.tab_group.addButton(button)
            self.tab_buttons[tab] = button
            tab_row.addWidget(button)

        self.inspector_scroll = QtWidgets.QScrollArea(inspector)
        self.inspector_scroll.setWidgetResizable(True)
        self.inspector_body = QtWidgets.QWidget()
        self.inspector_layout = QtWidgets.QVBoxLayout(self.inspector_body)
        self.inspector_layout.setAlignment(QtCore.Qt.AlignmentFlag.AlignTop)
        self.inspector_scroll.setWidget(self.inspector_body)

        inspector_layout.addLayout(tab_row)
        inspector_layout.addWidget(self.inspector_scroll, 1)

        # Preview
        right_panel = QtWidgets.QWidget(self)
        right_layout = QtWidgets.QVBoxLayout(right_panel)
        right_layout.setContentsMargins(6, 6, 6, 6)
        right_layout.setSpacing(6)

        self.preview = QWebEngineView(right_panel)
        right_layout.addWidget(QtWidgets.QLabel("Preview", right_panel))
        right_layout.addWidget(self.preview, 1)

        splitter.addWidget(left_panel)
        splitter.addWidget(inspector)
        splitter.addWidget(right_panel)
        splitter.setSizes([280, 380, 700])

        self.status = self.statusBar()

    def _build_menu(self) -> None:
        bar = self.menuBar()
        if bar is None:
            bar = QtWidgets.QMenuBar(self)
            self.setMenuBar(bar)

        file_menu = bar.addMenu("&File")
        self.act_new = QtGui.QAction("New Page", self)
        self.act_open = QtGui.QAction("Open Page…", self)
        self.act_save = QtGui.QAction("Save", self)
        self.act_save_as = QtGui.QAction("Save As…", self)
        self.act_export = QtGui.QAction("Export Page…", self)
        self.act_quit = QtGui.QAction("Quit", self)

        if file_menu is not None:
            file_menu.addActions([self.act_new, self.act_open])
            file_menu.addSeparator()
            file_menu.addActions([self.act_save, self.act_save_as])
            file_menu.addSeparator()
            file_menu.addAction(self.act_export)
            file_menu.addSeparator()
            file_menu.addAction(self.act_quit)

        view_menu = bar.addMenu("&View")
        self.act_expand = QtGui.QAction("Expand All Sections", self)
        self.act_collapse = QtGui.QAction("Collapse All Sections", self)
        if view_menu is not None:
            view_menu.addActions([self.act_expand, self.act_collapse])

        help_menu = bar.addMenu("&Help")
        self.act_about = QtGui.QAction("About", self)
        if help_menu is not None:
            help_menu.addAction(self.act_about)

    def _bind_events(self) -> None:
        self.structure.currentItemChanged.connect(self._on_structure_selection_changed)
        self.btn_add_section.clicked.connect(self.add_section)
        self.btn_add_inner.clicked.connect(self.add_inner_section)
        self.btn_col_left.clicked.connect(lambda: self.add_column("left"))
        self.btn_col_right.clicked.connect(lambda: self.add_column("right"))
        self.btn_add_widget.clicked.connect(self.add_widget)
        self.btn_move_up.clicked.connect(lambda: self.move_selected(-1))
        self.btn_move_down.clicked.connect(lambda: self.move_selected(1))
        self.btn_remove.clicked.connect(self.remove_selected)
        for tab, button in self.tab_buttons.items():
            button.clicked.connect(lambda _checked=False, t=tab: self.session.switch_tab(t))

        self.act_new.triggered.connect(self.new_document)
        self.act_open.triggered.connect(self.open_document_dialog)
        self.act_save.triggered.connect(self.save_document)
        self.act_save_as.triggered.connect(self.save_document_as)
        self.act_export.triggered.connect(self.export_page)
        self.act_quit.triggered.connect(self.close)
        self.act_expand.triggered.connect(lambda: self._set_all_sections(True))
        self.act_collapse.triggered.connect(lambda: self._set_all_sections(False))
        self.act_about.triggered.connect(self.show_about)

        self.session.tabs.on_panel_changed(self._on_panel_changed)
        self.session.tree.subscribe(lambda _event: self._debounce.start())

    # ---------------------------------------------------------- Documents --
    def new_document(self) -> None:
        self.session.load_document(PageDocument())
        self.session.create_section()
        self.document_path = None
        self._after_structure_change()
        self.update_window_title()

    def open_document_dialog(self) -> None:
        path, _ = QtWidgets.QFileDialog.getOpenFileName(self, "Open Page", "", "Page Document (*.pbpage)")
        if not path:
            return
        try:
            document = storage.load_document(path)
            self.session.load_document(document)
        except (OSError, DocumentFormatError) as exc:
            QtWidgets.QMessageBox.warning(self, "Open Page", f"Could not open {path}:\n{exc}")
            return
        self.document_path = Path(path)
        self._after_structure_change()
        self.update_window_title()
        if self.status is not None:
            self.status.showMessage(f"Opened {os.path.basename(path)}", 4000)

    def save_document(self) -> None:
        if not self.document_path:
            self.save_document_as()
            return
        storage.save_document(self.document_path, self.session.document())
        if self.status is not None:
            self.status.showMessage("Page saved", 2500)

    def save_document_as(self) -> None:
        path, _ = QtWidgets.QFileDialog.getSaveFileName(self, "Save Page As", "", "Page Document (*.pbpage)")
        if not path:
            return
        path = path if path.endswith(".pbpage") else f"{path}.pbpage"
        storage.save_document(path, self.session.document())
        self.document_path = Path(path)
        self.update_window_title()
        if self.status is not None:
            self.status.showMessage(f"Saved {os.path.basename(path)}", 4000)

    def export_page(self) -> None:
        out_dir = QtWidgets.QFileDialog.getExistingDirectory(self, "Export Page To…")
        if not out_dir:
            return
        page_path = generator.export_page(self.session.document(), out_dir)
        if self.status is not None:
            self.status.showMessage(f"Exported page to {out_dir}", 5000)
        QtWidgets.QMessageBox.information(self, "Export complete", f"Your page was exported to:\n{page_path}")

    # ---------------------------------------------------------- Structure --
    def _selected_id(self) -> Optional[str]:
        item = self.structure.currentItem()
        return item.data(0, NODE_ID_ROLE) if item is not None else None

    def _report(self, result: MutationResult, select: bool = True) -> None:
        if not result.ok:
            if self.status is not None:
                self.status.showMessage(result.message, 5000)
            return
        self._after_structure_change(result.node_id if select else None)

    def add_section(self) -> None:
        self._report(self.session.create_section())

    def add_inner_section(self) -> None:
        node_id = self._selected_id()
        if node_id is None:
            self.status.showMessage("Select a column first", 3000)
            return
        self._report(self.session.create_inner_section(node_id))

    def add_column(self, side: str) -> None:
        node_id = self._selected_id()
        if node_id is None:
            self.status.showMessage("Select a section or column first", 3000)
            return
        node = self.session.tree.get(node_id)
        if node.kind in (NodeKind.COLUMN, NodeKind.INNER_COLUMN):
            self._report(self.session.add_column(node.parent_id, side, node.id))
        else:
            self._report(self.session.add_column(node.id, side))

    def add_widget(self) -> None:
        node_id = self._selected_id()
        if node_id is None:
            self.status.showMessage("Select a column first", 3000)
            return
        self._report(self.session.add_widget(node_id, self.widget_picker.currentText()))

    def move_selected(self, offset: int) -> None:
        node_id = self._selected_id()
        if node_id is None:
            return
        node = self.session.tree.get(node_id)
        siblings = self.session.tree.children_of(node.parent_id)
        index = siblings.index(node) + offset
        if not 0 <= index < len(siblings):
            return
        self._report(self.session.move(node_id, node.parent_id, index))

    def remove_selected(self) -> None:
        node_id = self._selected_id()
        if node_id is None:
            return
        self._report(self.session.remove(node_id), select=False)

    def _after_structure_change(self, select_id: Optional[str] = None) -> None:
        self._refresh_structure(select_id or self.session.selected_id)
        self.update_preview()

    def _refresh_structure(self, select_id: Optional[str] = None) -> None:
        self.structure.blockSignals(True)
        self.structure.clear()
        selected_item: Optional[QtWidgets.QTreeWidgetItem] = None
        stack: List[Tuple[Optional[QtWidgets.QTreeWidgetItem], object]] = [
            (None, node) for node in reversed(self.session.tree.sections)
        ]
        while stack:
            parent_item, node = stack.pop()
            item = QtWidgets.QTreeWidgetItem([node.display_name])
            item.setData(0, NODE_ID_ROLE, node.id)
            if parent_item is None:
                self.structure.addTopLevelItem(item)
            else:
                parent_item.addChild(item)
            if node.id == select_id:
                selected_item = item
            stack.extend((item, child) for child in reversed(node.children))
        self.structure.expandAll()
        self.structure.blockSignals(False)
        if selected_item is not None:
            self.structure.setCurrentItem(selected_item)
        else:
            self.session.on_deselect()

    def _on_structure_selection_changed(self, current: Optional[QtWidgets.QTreeWidgetItem], _previous) -> None:
        if current is None:
            self.session.on_deselect()
            return
        self.session.on_select(current.data(0, NODE_ID_ROLE))

    # ---------------------------------------------------------- Inspector --
    def _on_panel_changed(self, panel: Optional[OrganizedPanel]) -> None:
        for tab, button in self.tab_buttons.items():
            button.setChecked(tab == self.session.tabs.active_tab)
        signature = None
        if panel is not None:
            signature = (
                f"{self.session.selected_id}:{panel.tab}",
                tuple((name, tuple(props)) for name, props in panel.sections.items()),
            )
        if signature == self._panel_signature:
            return
        self._panel_signature = signature
        self._rebuild_inspector(panel)

    def _clear_inspector(self) -> None:
        while self.inspector_layout.count():
            item = self.inspector_layout.takeAt(0)
            widget = item.widget() if item is not None else None
            if widget is not None:
                widget.deleteLater()

    def _rebuild_inspector(self, panel: Optional[OrganizedPanel]) -> None:
        self._clear_inspector()
        node = self.session.selected
        if panel is None or node is None:
            self.inspector_layout.addWidget(QtWidgets.QLabel("Select an element to edit it.", self.inspector_body))
            return
        if panel.empty:
            title = QtWidgets.QLabel(f"<b>{panel.empty_message}</b>", self.inspector_body)
            hint = QtWidgets.QLabel(panel.empty_hint, self.inspector_body)
            self.inspector_layout.addWidget(title)
            self.inspector_layout.addWidget(hint)
            return
        organizer = self.session.organizer
        for section, names in panel.sections.items():
            box = CollapsibleSection(section, section_title(section), organizer.is_open(section), self.inspector_body)
            box.toggled.connect(organizer.set_open)
            for name in names:
                descriptor = describe(name)
                editor = self._make_editor(node.id, name, node.attributes.get(name))
                box.form.addRow(descriptor.label, editor)
            self.inspector_layout.addWidget(box)

    def _make_editor(self, node_id: str, name: str, value: object) -> QtWidgets.QWidget:
        descriptor = describe(name)
        if descriptor.control == "checkbox":
            box = QtWidgets.QCheckBox(self.inspector_body)
            box.setChecked(bool(value) and str(value).lower() not in ("0", "false", "no", "off"))
            box.toggled.connect(lambda checked: self._apply(node_id, name, checked))
            return box
        if descriptor.control == "select":
            combo = QtWidgets.QComboBox(self.inspector_body)
            combo.addItems([""] + list(descriptor.options))
            combo.setCurrentText("" if value is None else str(value))
            combo.currentTextChanged.connect(lambda text: self._apply(node_id, name, text or None))
            return combo
        if descriptor.control == "textarea":
            area = QtWidgets.QPlainTextEdit(self.inspector_body)
            area.setPlainText("" if value is None else str(value))
            area.setFixedHeight(90)
            area.textChanged.connect(lambda: self._apply(node_id, name, area.toPlainText() or None))
            return area
        line = QtWidgets.QLineEdit(self.inspector_body)
        line.setText("" if value is None else str(value))
        if descriptor.default_unit:
            line.setPlaceholderText(f"e.g. 10 ({descriptor.default_unit})")
        line.editingFinished.connect(lambda: self._apply(node_id, name, line.text().strip() or None))
        if descriptor.control != "color":
            return line
        row = QtWidgets.QWidget(self.inspector_body)
        row_layout = QtWidgets.QHBoxLayout(row)
        row_layout.setContentsMargins(0, 0, 0, 0)
        pick = QtWidgets.QToolButton(row)
        pick.setText("…")
        pick.clicked.connect(lambda: self._pick_color(line))
        row_layout.addWidget(line, 1)
        row_layout.addWidget(pick)
        return row

    def _pick_color(self, line: QtWidgets.QLineEdit) -> None:
        color = QtWidgets.QColorDialog.getColor(QtGui.QColor(line.text() or "#000000"), self, "Pick colour")
        if color.isValid():
            line.setText(color.name())
            line.editingFinished.emit()

    def _apply(self, node_id: str, name: str, value: object) -> None:
        if value is None:
            result = self.session.clear_property(node_id, name)
        else:
            result = self.session.set_property(node_id, name, value)
        if not result.ok and self.status is not None:
            self.status.showMessage(result.message, 5000)

    def _set_all_sections(self, is_open: bool) -> None:
        panel = self.session.panel
        if panel is None:
            return
        if is_open:
            self.session.organizer.expand_all(panel.sections)
        else:
            self.session.organizer.collapse_all(panel.sections)
        self._panel_signature = None
        self._on_panel_changed(panel)

    # ------------------------------------------------------------ Preview --
    def update_preview(self) -> None:
        if self._preview_tmp and os.path.isdir(self._preview_tmp):
            shutil.rmtree(self._preview_tmp, ignore_errors=True)
        self._preview_tmp = tempfile.mkdtemp(prefix="pagebuilder_preview_")
        path = generator.export_page(self.session.document(), self._preview_tmp)
        self.preview.setUrl(QtCore.QUrl.fromLocalFile(str(path)))

    # ---------------------------------------------------------------- Misc --
    def show_about(self) -> None:
        QtWidgets.QMessageBox.information(
            self,
            "About",
            f"{APP_TITLE}\n\nA visual section/column/widget page editor built with PyQt6.",
        )

    def update_window_title(self) -> None:
        suffix = f" — {self.document_path.name}" if self.document_path else ""
        self.setWindowTitle(f"{APP_TITLE} — {self.session.title}{suffix}")

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # noqa: N802 (Qt override)
        if self._preview_tmp and os.path.isdir(self._preview_tmp):
            shutil.rmtree(self._preview_tmp, ignore_errors=True)
        super().closeEvent(event)
