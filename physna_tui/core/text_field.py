"""
Single-line editable text with a cursor.

The cursor is a character index into ``text`` (Python strings are sequences of
code points), so multi-byte characters are never split. The invariant
``0 <= cursor <= len(text)`` holds after every operation.
"""

from __future__ import annotations

from physna_tui.core.errors import InvalidCursorPosition


class TextField:
    """Cursor-addressable text buffer backing the search field."""

    def __init__(self, text: str = ""):
        self._text = text
        self._cursor = len(text)

    def __repr__(self) -> str:
        return f"TextField(text={self._text!r}, cursor={self._cursor})"

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._text)

    def is_empty(self) -> bool:
        return not self._text

    def set_text(self, text: str) -> None:
        """Replace the contents and move the cursor to the end."""
        self._text = str(text)
        self._cursor = len(self._text)

    def set_cursor(self, index: int) -> None:
        """
        Move the cursor to ``index``.

        Raises:
            InvalidCursorPosition: If ``index`` is outside ``[0, len(text)]``
        """
        if index < 0 or index > len(self._text):
            raise InvalidCursorPosition(index, len(self._text))
        self._cursor = index

    def clear(self) -> None:
        self._text = ""
        self._cursor = 0

    # Insertion

    def insert_character(self, character: str) -> None:
        """Insert a single character at the cursor and step past it."""
        if len(character) != 1:
            raise ValueError(f"Expected a single character, got {character!r}")
        self.insert_string(character)

    def insert_string(self, value: str) -> None:
        """Insert ``value`` at the cursor; the cursor ends up after it."""
        i = self._cursor
        self._text = self._text[:i] + value + self._text[i:]
        self._cursor = i + len(value)

    def append_character(self, character: str) -> None:
        self.append_string(character)

    def append_string(self, value: str) -> None:
        """Append at the end regardless of the cursor, then move to the end."""
        self._text += value
        self._cursor = len(self._text)

    # Deletion

    def delete(self) -> None:
        """Remove the character under the cursor, if there is one."""
        i = self._cursor
        if i < len(self._text):
            self._text = self._text[:i] + self._text[i + 1:]

    def backspace(self) -> None:
        """Remove the character before the cursor."""
        if self._cursor > 0:
            self.left()
            self.delete()

    # Navigation

    def left(self) -> None:
        if self._cursor > 0:
            self._cursor -= 1

    def right(self) -> None:
        if self._cursor < len(self._text):
            self._cursor += 1

    def home(self) -> None:
        self._cursor = 0

    def end(self) -> None:
        self._cursor = len(self._text)


__all__ = ["TextField"]
