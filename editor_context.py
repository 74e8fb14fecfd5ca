from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass
class EditorContext:
    store: Any
    history: Any
    selection: Any
    _set_status: Callable[[str, float], None]

    # Editing state
    mode: str = "normal"  # normal | editing
    edit_row_id: Optional[str] = None
    edit_field: Optional[str] = None
    edit_original: str = ""
    edit_caret: int = 0

    # IME composition
    composing: bool = False

    # Focus waiting for the renderer to show a freshly appended row
    pending_focus: Optional[tuple] = None

    @property
    def editing(self) -> bool:
        return self.mode == "editing"

    def clear_edit(self):
        self.mode = "normal"
        self.edit_row_id = None
        self.edit_field = None
        self.edit_original = ""
        self.edit_caret = 0
