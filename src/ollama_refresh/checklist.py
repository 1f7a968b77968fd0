"""Selection state for the interactive checklist.

Row 0 is the "All" pseudo-item; rows ``1..n`` are the models.  Checking
"All" checks every model and locks them; the "All" row is otherwise
derived and is checked exactly when every model is checked.
"""

from __future__ import annotations

from dataclasses import dataclass

ALL_LABEL = "All"


@dataclass
class ChecklistItem:
    label: str
    checked: bool = False


class Checklist:
    """Checkbox state plus the focused row, owned by one UI instance."""

    def __init__(self, labels: list[str]) -> None:
        self.items = [ChecklistItem(label) for label in labels]
        self.all_checked = False
        self.cursor = 0

    def __len__(self) -> int:
        return len(self.items) + 1

    @property
    def locked(self) -> bool:
        """Model rows are locked (rendered disabled) while "All" is checked."""
        return self.all_checked

    def toggle_all(self) -> None:
        self.all_checked = not self.all_checked
        for item in self.items:
            item.checked = self.all_checked

    def toggle(self, index: int) -> None:
        """Toggle model *index* (0-based) and re-derive the "All" row."""
        item = self.items[index]
        item.checked = not item.checked
        self.all_checked = all(i.checked for i in self.items)

    def toggle_row(self, row: int) -> None:
        """Toggle by display row, where row 0 is "All"."""
        if not 0 <= row < len(self):
            msg = f"Row {row} out of range 0..{len(self) - 1}"
            raise IndexError(msg)
        self.cursor = row
        if row == 0:
            self.toggle_all()
        else:
            self.toggle(row - 1)

    def move(self, delta: int) -> None:
        self.cursor = (self.cursor + delta) % len(self)

    def selected(self) -> list[str]:
        return [item.label for item in self.items if item.checked]
