import logging
import os
from typing import Any, List, Optional, Protocol

from .errors import SaveError
from .focus import FILES, FocusController, FocusTarget
from .metadata import Metadata, MetadataStore, diff
from .paths import EntryKind, classify, list_directory, resolve, selected_path

log = logging.getLogger(__name__)

SAVED_MESSAGE = "Metadata saved successfully!"
NO_CHANGES_MESSAGE = "No changes detected"


class UIContext(Protocol):
    """What the session needs from a presentation toolkit."""

    def get_root(self) -> Any: ...
    def set_root(self, root: Any) -> None: ...
    def show_error(self, msg: str) -> None: ...
    def show_message(self, msg: str) -> None: ...
    def get_form(self) -> Any: ...
    def get_file_list(self) -> Any: ...
    def get_current_dir(self) -> str: ...
    def set_current_dir(self, directory: str) -> None: ...
    def get_focus_index(self) -> int: ...
    def set_focus_index(self, idx: int) -> None: ...
    def save_metadata(self, file_path: str, values: Metadata) -> Optional[str]: ...
    def populate_form(self, meta: Metadata) -> None: ...
    def show_listing(self, directory: str, entries: List[str]) -> None: ...
    def set_focus(self, target: FocusTarget) -> None: ...


class Session:
    """Current directory, pinned file, focus position and the last loaded tags."""

    def __init__(self, ui: UIContext, store: MetadataStore, current_dir: str,
                 current_file: Optional[str] = None):
        self.ui = ui
        self.store = store
        self.current_dir = os.path.abspath(current_dir)
        self.current_file = current_file
        self.focus_index = 0
        self.metadata = Metadata()
        # File the metadata snapshot was read from
        self.metadata_path: Optional[str] = None
        self.focus =FocusController(self, browser_visible=current_file is None)

    @property
    def direct_mode(self) -> bool:
        return self.current_file is not None

    def start(self):
        if self.direct_mode:
            self.metadata = self.store.read(self.current_file)
            self.metadata_path = self.current_file
            self.ui.populate_form(self.metadata)
            self.ui.set_focus(self.focus.focus_first_field())
        else:
            self.load_listing(self.current_dir)
            self.focus.reset()
            self.ui.set_focus(FocusTarget(FILES))

    # -------- Browsing --------
    def load_listing(self, directory: str):
        self.current_dir = directory
        self.ui.show_listing(directory, list_directory(directory))

    def navigate(self, entry: str) -> bool:
        new_dir = resolve(self.current_dir, entry)
        if not os.path.isdir(new_dir):
            log.info("not a directory, staying in %s: %s", self.current_dir, new_dir)
            return False
        self.load_listing(new_dir)
        return True

    def select(self, entry: str):
        if classify(entry) is not EntryKind.AUDIO_FILE:
            self.navigate(entry)
            return
        path = resolve(self.current_dir, entry)
        self.metadata = self.store.read(path)
        self.metadata_path = path
        self.ui.populate_form(self.metadata)
        self.ui.set_focus(self.focus.focus_first_field())

    # -------- Focus --------
    def tab(self):
        form = self.ui.get_form()
        self.ui.set_focus(self.focus.advance(form.field_count, form.button_count))

    def backtab(self):
        form = self.ui.get_form()
        self.ui.set_focus(self.focus.retreat(form.field_count, form.button_count))

    def clear_form(self):
        self.ui.get_form().clear()

    # -------- Saving --------
    def save_target(self) -> Optional[str]:
        if self.direct_mode:
            return self.current_file
        file_list = self.ui.get_file_list()
        if file_list is None:
            return None
        return selected_path(file_list.entries, file_list.selection, self.current_dir)

    def save(self, file_path: str, values: Metadata) -> Optional[str]:
        """Write the form values; show the diff or the error. Returns the diff on success."""
        # A highlighted but unopened file has no snapshot; the store reads it
        before = self.metadata if file_path == self.metadata_path else None
        try:
            before, after = self.store.write(file_path, values, before=before)
        except SaveError as e:
            log.error("saving %s failed: %s", file_path, e)
            self.ui.show_error(str(e))
            return None
        self.metadata = after
        self.metadata_path = file_path
        changes = diff(before, after)
        if changes:
            self.ui.show_message(f"{SAVED_MESSAGE}\n\n{changes}")
        else:
            self.ui.show_message(NO_CHANGES_MESSAGE)
        return changes

    def save_form(self) -> Optional[str]:
        path = self.save_target()
        if path is None:
            return None
        return self.save(path, self.ui.get_form().to_metadata())
