from typing import NamedTuple

FILES = "files"
FIELD = "field"
BUTTON = "button"


class FocusTarget(NamedTuple):
    kind: str
    index: int = 0


class FocusController:
    """Tab ring over the file list (browser mode only), form fields and buttons.

    The position lives on the session; the ring size is derived again from
    the live field/button counts on every call.
    """

    def __init__(self, session, browser_visible: bool):
        self.session = session
        self.browser_visible = browser_visible

    def size(self, field_count: int, button_count: int) -> int:
        return (1 if self.browser_visible else 0) + field_count + button_count

    def target(self, field_count: int, button_count: int) -> FocusTarget:
        n = self.size(field_count, button_count)
        pos = self.session.focus_index % n if n else 0
        if self.browser_visible:
            if pos == 0:
                return FocusTarget(FILES)
            pos -= 1
        if pos < field_count:
            return FocusTarget(FIELD, pos)
        return FocusTarget(BUTTON, pos - field_count)

    def advance(self, field_count: int, button_count: int) -> FocusTarget:
        n = self.size(field_count, button_count)
        if n:
            self.session.focus_index = (self.session.focus_index + 1) % n
        return self.target(field_count, button_count)

    def retreat(self, field_count: int, button_count: int) -> FocusTarget:
        n = self.size(field_count, button_count)
        if n:
            self.session.focus_index = (self.session.focus_index - 1 + n) % n
        return self.target(field_count, button_count)

    def reset(self):
        self.session.focus_index = 0

    def focus_first_field(self) -> FocusTarget:
        self.session.focus_index = 1 if self.browser_visible else 0
        return FocusTarget(FIELD, 0)
