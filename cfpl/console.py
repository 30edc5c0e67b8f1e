import builtins
from typing import Optional


class Console:
    """Line-oriented standard input/output used by OUTPUT: and INPUT:."""

    def read_line(self) -> Optional[str]:
        try:
            return builtins.input()
        except EOFError:
            return None

    def write_line(self, text: str) -> None:
        print(text)
