import logging
import sys

from PyQt6.QtWidgets import (QApplication, QMainWindow, QWidget, QHBoxLayout,
                             QTreeWidget, QTreeWidgetItem, QTextEdit,
                             QSplitter, QTabWidget, QMessageBox)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont

from cli_main import hex_dump, load_table, record_rows
from firmware_api import FirmwareAccessError
from inventory import COLLECTIONS, SINGLETONS, parse_structure
from fields import InvalidStructureError
from parsers import iter_raw_structures
from structures import TYPE_NAMES

logger = logging.getLogger(__name__)


class HexViewer(QTextEdit):
    def __init__(self):
        super().__init__()
        self.setReadOnly(True)
        self.setFont(QFont("Consolas", 10))

    def set_data(self, data):
        self.setText(hex_dump(data) if data else "")


class MainWindow(QMainWindow):
    def __init__(self, version, structures):
        super().__init__()
        self.version = version
        self.structures = structures
        self.setWindowTitle(f"SMBIOS Inventory Viewer - SMBIOS {version}")
        self.resize(1000, 700)

        # Main Layout
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QHBoxLayout(central_widget)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        layout.addWidget(splitter)

        # Left Panel: Tree
        self.tree = QTreeWidget()
        self.tree.setHeaderLabel("SMBIOS Structures")
        self.tree.itemClicked.connect(self.on_item_clicked)
        splitter.addWidget(self.tree)

        # Right Panel: Tabs
        self.tabs = QTabWidget()
        splitter.addWidget(self.tabs)

        # Parsed View Tab
        self.parsed_view = QTextEdit()
        self.parsed_view.setReadOnly(True)
        self.parsed_view.setFont(QFont("Consolas", 10))
        self.tabs.addTab(self.parsed_view, "Parsed View")

        # Hex View Tab
        self.hex_view = HexViewer()
        self.tabs.addTab(self.hex_view, "Hex View")

        # Set splitter ratio
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 3)

        self.load_data()

    def load_data(self):
        decoded_root = QTreeWidgetItem(self.tree, ["Decoded"])
        other_root = QTreeWidgetItem(self.tree, ["Not decoded"])

        for index, structure in enumerate(self.structures):
            name = f"Type {structure.type_code} (Handle {structure.handle:04X})"
            if structure.type_code in TYPE_NAMES:
                name += f" - {TYPE_NAMES[structure.type_code]}"

            decoded = structure.type_code in SINGLETONS or structure.type_code in COLLECTIONS
            item = QTreeWidgetItem(decoded_root if decoded else other_root, [name])
            item.setData(0, Qt.ItemDataRole.UserRole, index)

        self.tree.expandAll()

    def on_item_clicked(self, item, column):
        index = item.data(0, Qt.ItemDataRole.UserRole)
        if index is None:
            return
        self.show_structure(self.structures[index])

    def show_structure(self, structure):
        self.hex_view.set_data(structure.formatted)

        output = []
        title = f"SMBIOS Type {structure.type_code}"
        if structure.type_code in TYPE_NAMES:
            title += f" - {TYPE_NAMES[structure.type_code]}"

        output.append(title)
        output.append(f"Handle: 0x{structure.handle:04X}")
        output.append(f"Length: {len(structure.formatted) + 4}")
        output.append("=" * 40)

        if structure.type_code in SINGLETONS or structure.type_code in COLLECTIONS:
            try:
                record = parse_structure(structure, self.version)
                for label, text in record_rows(record):
                    output.append(f"{label:32}: {text}")
            except InvalidStructureError as e:
                output.append(f"Error: {e}")
        elif structure.strings:
            output.append("Strings:")
            for i, s in enumerate(structure.strings):
                output.append(f"  {i+1}: {s}")
        else:
            output.append("No strings.")

        self.parsed_view.setText("\n".join(output))


def run_gui(args):
    app = QApplication(sys.argv)

    try:
        version, data = load_table(args)
    except (FirmwareAccessError, ValueError) as e:
        logger.error("Failed to read SMBIOS table: %s", e)
        QMessageBox.critical(None, "Error", f"Failed to read SMBIOS table: {e}")
        return 1

    window = MainWindow(version, list(iter_raw_structures(data)))
    window.show()
    return app.exec()
