import curses
import os
from dataclasses import dataclass
from typing import Dict, List, Optional

from .focus import BUTTON, FIELD, FILES, FocusTarget
from .metadata import Metadata, MetadataStore
from .paths import EntryKind, classify, list_directory, resolve
from .session import Session

IMAGE_EXTS = (".jpg", ".jpeg", ".png", ".gif")

FORM_FIELDS = [
    ("track_name", "Track Name"),
    ("artist", "Artist"),
    ("album", "Album"),
    ("cover_path", "Cover Image Path"),
]
FORM_BUTTONS = ["Save", "Clear"]

TAB = 9
ESC = 27
ENTER_KEYS = (curses.KEY_ENTER, 10, 13)
BACKSPACE_KEYS = (curses.KEY_BACKSPACE, 127, 8)

BROWSER_STATUS = "↑↓ Navigate | Enter: Open | Tab/Shift+Tab: Cycle | Esc: Clear | c: Cover | h: Help | q: Quit"
DIRECT_STATUS = "Tab/Shift+Tab: Cycle | Enter: Edit/Press | Esc: Clear | c: Cover | h: Help | q: Quit"

HELP_TEXT = """id3tui help

Tab / Shift+Tab   Cycle files, fields and buttons
Up / Down         Move in the file list
Enter             Open dir/file, edit field, press button
Backspace         Parent directory (file list)
Esc               Clear all form fields
c                 Choose a cover image
h or ?            Show this help
q                 Quit"""


class FileList:
    """Entries of the current directory plus the highlighted row."""

    def __init__(self):
        self.entries: List[str] = []
        self.selection = 0
        self.title = "Files"

    def set_entries(self, entries: List[str]):
        self.entries = list(entries)
        self.selection = 0

    def current(self) -> Optional[str]:
        if not self.entries:
            return None
        return self.entries[self.selection]

    def up(self):
        self.selection = (self.selection - 1) % max(1, len(self.entries))

    def down(self):
        self.selection = (self.selection + 1) % max(1, len(self.entries))


class MetadataForm:
    def __init__(self):
        self.values: Dict[str, str] = {key: "" for key, _ in FORM_FIELDS}
        self.buttons = list(FORM_BUTTONS)

    @property
    def field_count(self) -> int:
        return len(FORM_FIELDS)

    @property
    def button_count(self) -> int:
        return len(self.buttons)

    def label(self, idx: int) -> str:
        return FORM_FIELDS[idx][1]

    def get(self, idx: int) -> str:
        return self.values[FORM_FIELDS[idx][0]]

    def set(self, idx: int, value: str):
        self.values[FORM_FIELDS[idx][0]] = value

    def set_by_key(self, key: str, value: str):
        self.values[key] = value

    def clear(self):
        for key, _ in FORM_FIELDS:
            self.values[key] = ""

    def populate(self, meta: Metadata):
        for key, _ in FORM_FIELDS:
            self.values[key] = getattr(meta, key)

    def to_metadata(self) -> Metadata:
        return Metadata(**self.values)


@dataclass
class Modal:
    text: str
    kind: str = "message"  # message, error or help


MAIN_VIEW = "main"


# ---- Theming ----
class Theme:
    def __init__(self, colors: bool = False):
        if colors:
            self.title = curses.color_pair(1) | curses.A_BOLD
            self.focus = curses.color_pair(2)
            self.dim = curses.color_pair(3)
            self.error = curses.color_pair(4) | curses.A_BOLD
            self.message = curses.color_pair(5) | curses.A_BOLD
        else:
            self.title = curses.A_BOLD
            self.focus = curses.A_REVERSE
            self.dim = curses.A_DIM
            self.error = curses.A_BOLD
            self.message = curses.A_BOLD


def init_colors() -> bool:
    if not curses.has_colors():
        return False
    curses.start_color()
    try:
        curses.use_default_colors()
    except curses.error:
        pass
    curses.init_pair(1, curses.COLOR_BLUE, -1)                    # titles
    curses.init_pair(2, curses.COLOR_WHITE, curses.COLOR_BLUE)    # focused widget
    curses.init_pair(3, curses.COLOR_CYAN, -1)                    # dim text
    curses.init_pair(4, curses.COLOR_RED, -1)                     # error dialog
    curses.init_pair(5, curses.COLOR_GREEN, -1)                   # message dialog
    return True


class Tui:
    """Curses front end: file list on the left, tag form on the right.

    Implements the session's UIContext. One key handler serves both panes;
    where a key goes is decided by the current focus target.
    """

    def __init__(self, stdscr, store: MetadataStore, start_dir: str, current_file: Optional[str] = None):
        self.stdscr = stdscr
        self.form = MetadataForm()
        self.file_list: Optional[FileList] = None if current_file else FileList()
        self.session = Session(self, store, start_dir, current_file)
        self.root = MAIN_VIEW
        self.focus_target = FocusTarget(FIELD if current_file else FILES)
        self.theme = Theme()

    # -------- UIContext --------
    def get_root(self):
        return self.root

    def set_root(self, root):
        self.root = root

    def show_error(self, msg: str):
        self.set_root(Modal(msg, "error"))

    def show_message(self, msg: str):
        self.set_root(Modal(msg, "message"))

    def get_form(self) -> MetadataForm:
        return self.form

    def get_file_list(self) -> Optional[FileList]:
        return self.file_list

    def get_current_dir(self) -> str:
        return self.session.current_dir

    def set_current_dir(self, directory: str):
        self.session.current_dir = directory

    def get_focus_index(self) -> int:
        return self.session.focus_index

    def set_focus_index(self, idx: int):
        self.session.focus_index = idx

    def save_metadata(self, file_path: str, values: Metadata) -> Optional[str]:
        return self.session.save(file_path, values)

    def populate_form(self, meta: Metadata):
        self.form.populate(meta)

    def show_listing(self, directory: str, entries: List[str]):
        if self.file_list is None:
            return
        self.file_list.set_entries(entries)
        self.file_list.title = "Files - " + (os.path.basename(directory) or directory)

    def set_focus(self, target: FocusTarget):
        self.focus_target = target

    # -------- Input --------
    @property
    def modal(self) -> Optional[Modal]:
        return self.root if isinstance(self.root, Modal) else None

    def handle_key(self, ch: int) -> bool:
        """Process one key press. Returns False when the editor should exit."""
        if self.modal is not None:
            if ch in ENTER_KEYS or ch in (ESC, ord(" ")):
                self.set_root(MAIN_VIEW)
            return True

        if ch == ord("q"):
            return False
        if ch == TAB:
            self.session.tab()
            return True
        if ch == curses.KEY_BTAB:
            self.session.backtab()
            return True
        if ch == ESC:
            self.session.clear_form()
            return True
        if ch in (ord("h"), ord("?")):
            self.set_root(Modal(HELP_TEXT, "help"))
            return True
        if ch == ord("c"):
            picked = self.file_picker("Select cover image", IMAGE_EXTS)
            if picked:
                self.form.set_by_key("cover_path", picked)
            return True

        target = self.focus_target
        if target.kind == FILES:
            self._files_key(ch)
        elif target.kind == FIELD:
            if ch in ENTER_KEYS:
                self.edit_field(target.index)
            elif ch == curses.KEY_DOWN:
                self.session.tab()
            elif ch == curses.KEY_UP:
                self.session.backtab()
        elif target.kind == BUTTON:
            if ch in ENTER_KEYS or ch == ord(" "):
                self.press_button(target.index)
        return True

    def _files_key(self, ch: int):
        file_list = self.file_list
        if file_list is None:
            return
        if ch == curses.KEY_UP:
            file_list.up()
        elif ch == curses.KEY_DOWN:
            file_list.down()
        elif ch in BACKSPACE_KEYS:
            self.session.navigate("..")
        elif ch in ENTER_KEYS:
            entry = file_list.current()
            if entry:
                self.session.select(entry)

    def press_button(self, idx: int):
        name = self.form.buttons[idx]
        if name == "Save":
            self.session.save_form()
        elif name == "Clear":
            self.session.clear_form()

    def edit_field(self, idx: int):
        value = self.form.get(idx)
        new_val = self.prompt_input(f"{self.form.label(idx)}: ", value)
        if new_val is not None:
            self.form.set(idx, new_val)

    # -------- Drawing --------
    def _put(self, y: int, x: int, text: str, width: int, attr: int = 0):
        if width <= 0:
            return
        try:
            self.stdscr.addnstr(y, x, text[:width], width, attr)
        except curses.error:
            pass

    def draw(self):
        self.stdscr.erase()
        h, w = self.stdscr.getmaxyx()

        if self.session.direct_mode:
            header = "Editing: " + os.path.basename(self.session.current_file)
        else:
            header = "Dir: " + self.session.current_dir
        self._put(0, 0, header, w, self.theme.title)
        self._put(1, 0, "─" * w, w)

        body_top = 2
        body_h = h - body_top - 2
        if self.session.direct_mode:
            self.draw_form(body_top, 0, body_h, w)
        else:
            split_x = max(20, w // 3)
            self.draw_files(body_top, 0, body_h, split_x)
            self.draw_form(body_top, split_x, body_h, w - split_x)

        self._put(h - 2, 0, "═" * w, w)
        status = DIRECT_STATUS if self.session.direct_mode else BROWSER_STATUS
        self._put(h - 1, 0, status, w - 1, self.theme.dim)

        if self.modal is not None:
            self.draw_modal(self.modal, h, w)
        self.stdscr.refresh()

    def _box(self, y: int, x: int, h: int, w: int, title: str, attr: int = 0):
        if h < 2 or w < 4:
            return
        top = "┌─ " + title + " " + "─" * max(0, w - len(title) - 5) + "┐"
        self._put(y, x, top, w, attr)
        for i in range(1, h - 1):
            self._put(y + i, x, "│", 1)
            self._put(y + i, x + w - 1, "│", 1)
        self._put(y + h - 1, x, "└" + "─" * (w - 2) + "┘", w)

    def draw_files(self, y: int, x: int, h: int, w: int):
        file_list = self.file_list
        focused = self.focus_target.kind == FILES
        self._box(y, x, h, w, file_list.title, self.theme.title if focused else 0)
        rows = h - 2
        start = 0
        if file_list.selection >= rows:
            start = file_list.selection - rows + 1
        for i in range(start, min(len(file_list.entries), start + rows)):
            name = file_list.entries[i]
            is_sel = i == file_list.selection
            marker = "►" if is_sel else " "
            attr = self.theme.focus if (is_sel and focused) else 0
            self._put(y + 1 + i - start, x + 1, f"{marker} {name}", w - 2, attr)

    def draw_form(self, y: int, x: int, h: int, w: int):
        in_form = self.focus_target.kind in (FIELD, BUTTON)
        self._box(y, x, h, w, "Metadata Editor", self.theme.title if in_form else 0)
        line = y + 1
        for i in range(self.form.field_count):
            if line >= y + h - 3:
                break
            is_sel = self.focus_target == FocusTarget(FIELD, i)
            marker = "►" if is_sel else " "
            self._put(line, x + 2, f"{marker} {self.form.label(i)}:", w - 4, curses.A_BOLD if is_sel else self.theme.dim)
            self._put(line + 1, x + 4, self.form.get(i) or "", w - 6, self.theme.focus if is_sel else 0)
            line += 3

        bx = x + 4
        for i, name in enumerate(self.form.buttons):
            label = f"[ {name} ]"
            is_sel = self.focus_target == FocusTarget(BUTTON, i)
            self._put(min(line, y + h - 2), bx, label, max(0, x + w - 1 - bx), self.theme.focus if is_sel else 0)
            bx += len(label) + 2

    def draw_modal(self, modal: Modal, h: int, w: int):
        lines = modal.text.split("\n")
        win_w = min(max(max(len(line) for line in lines) + 6, 30), w - 2)
        win_h = min(len(lines) + 4, h - 2)
        y = max(0, h // 2 - win_h // 2)
        x = max(0, w // 2 - win_w // 2)
        attr = {"error": self.theme.error, "message": self.theme.message}.get(modal.kind, 0)
        title = {"error": "Error", "message": "Info", "help": "Help"}[modal.kind]
        for i in range(win_h):
            self._put(y + i, x, " " * win_w, win_w)
        self._box(y, x, win_h, win_w, title, attr)
        for i, text in enumerate(lines[: win_h - 4]):
            self._put(y + 1 + i, x + 3, text, win_w - 6, attr)
        ok = "[ OK ]"
        self._put(y + win_h - 2, x + (win_w - len(ok)) // 2, ok, len(ok), self.theme.focus)

    # -------- Modal helpers (blocking) --------
    def prompt_input(self, prompt: str, initial: str = "") -> Optional[str]:
        h, w = self.stdscr.getmaxyx()
        win_h = 3
        win_w = min(max(40, len(prompt) + len(initial) + 10), w - 4)
        win = curses.newwin(win_h, win_w, h // 2 - win_h // 2, w // 2 - win_w // 2)
        win.keypad(True)
        curses.curs_set(1)
        buffer = list(initial)
        pos = len(buffer)
        field_w = win_w - 4
        try:
            while True:
                win.erase()
                win.box()
                win.addnstr(0, 2, f" {prompt.strip()} ", win_w - 4)
                start = max(0, pos - field_w + 1)
                try:
                    win.addstr(1, 2, "".join(buffer)[start:start + field_w - 1])
                    win.move(1, 2 + pos - start)
                except curses.error:
                    pass
                win.refresh()

                try:
                    ch = win.get_wch()
                except curses.error:
                    continue

                if isinstance(ch, str):
                    if ch in ("\n", "\r"):
                        return "".join(buffer)
                    if ch == "\x1b":
                        return None
                    if ch in ("\x7f", "\b"):
                        if pos > 0:
                            buffer.pop(pos - 1)
                            pos -= 1
                    elif ch.isprintable():
                        buffer.insert(pos, ch)
                        pos += 1
                    continue

                if ch == curses.KEY_ENTER:
                    return "".join(buffer)
                elif ch == curses.KEY_LEFT:
                    pos = max(0, pos - 1)
                elif ch == curses.KEY_RIGHT:
                    pos = min(len(buffer), pos + 1)
                elif ch == curses.KEY_BACKSPACE:
                    if pos > 0:
                        buffer.pop(pos - 1)
                        pos -= 1
                elif ch == curses.KEY_DC:
                    if pos < len(buffer):
                        buffer.pop(pos)
                elif ch == curses.KEY_HOME:
                    pos = 0
                elif ch == curses.KEY_END:
                    pos = len(buffer)
        finally:
            curses.curs_set(0)

    def file_picker(self, title: str, exts) -> Optional[str]:
        h, w = self.stdscr.getmaxyx()
        win_h = max(12, min(30, h - 4))
        win_w = max(40, min(100, w - 4))
        win = curses.newwin(win_h, win_w, h // 2 - win_h // 2, w // 2 - win_w // 2)
        win.keypad(True)
        directory = self.session.current_dir
        picker = FileList()
        picker.set_entries(list_directory(directory, exts))
        while True:
            win.erase()
            win.box()
            try:
                win.addnstr(0, 2, f" {title} "[: win_w - 4], win_w - 4)
                win.addnstr(1, 2, directory[: win_w - 4], win_w - 4, curses.A_BOLD)
            except curses.error:
                pass
            max_rows = win_h - 5
            start = 0
            if picker.selection >= max_rows:
                start = picker.selection - max_rows + 1
            for i in range(start, min(len(picker.entries), start + max_rows)):
                attr = curses.A_REVERSE if i == picker.selection else 0
                try:
                    win.addnstr(2 + i - start, 2, picker.entries[i][: win_w - 4], win_w - 4, attr)
                except curses.error:
                    pass
            try:
                win.addnstr(win_h - 2, 2, "Enter: open/select  Backspace: up  ESC: cancel"[: win_w - 4],
                            win_w - 4, curses.A_DIM)
            except curses.error:
                pass
            win.refresh()

            ch = win.getch()
            if ch == ESC:
                return None
            elif ch == curses.KEY_UP:
                picker.up()
            elif ch == curses.KEY_DOWN:
                picker.down()
            elif ch in BACKSPACE_KEYS:
                directory = resolve(directory, "..")
                picker.set_entries(list_directory(directory, exts))
            elif ch in ENTER_KEYS:
                entry = picker.current()
                if not entry:
                    continue
                if classify(entry) is EntryKind.AUDIO_FILE:
                    return resolve(directory, entry)
                directory = resolve(directory, entry)
                picker.set_entries(list_directory(directory, exts))

    def loop(self):
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        self.draw()
        while True:
            try:
                ch = self.stdscr.getch()
            except KeyboardInterrupt:
                break
            if ch == curses.KEY_RESIZE:
                self.draw()
                continue
            if not self.handle_key(ch):
                break
            self.draw()


def main(stdscr, store: MetadataStore, start_dir: str, current_file: Optional[str] = None):
    colors = init_colors()
    stdscr.keypad(True)
    app = Tui(stdscr, store, start_dir, current_file)
    app.theme = Theme(colors)
    app.session.start()
    app.loop()
