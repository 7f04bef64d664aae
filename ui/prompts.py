"""Line-based prompts used by the interactive flows.

Each prompt re-asks until the answer passes `validate`, which returns the
converted value or raises ValueError with the message to show.
"""
from typing import Callable, Sequence, TextIO


class Prompter:
    def __init__(self, input_fn: Callable[[str], str], out: TextIO):
        self._input = input_fn
        self._out = out

    def ask(self, message: str, default: str | None = None, validate=None):
        suffix = f" [{default}]" if default not in (None, "") else ""
        while True:
            answer = self._input(f"{message}{suffix}: ").strip()
            if not answer and default is not None:
                answer = str(default)
            if validate is None:
                return answer
            try:
                return validate(answer)
            except ValueError as exc:
                print(f"  {exc}", file=self._out)

    def choose(self, message: str, options: Sequence[tuple[str, object]], default_index: int = 0):
        """Numbered pick list; returns the value of the chosen (label, value) pair."""
        print(message, file=self._out)
        for i, (label, _) in enumerate(options, start=1):
            print(f"  {i}) {label}", file=self._out)

        def pick(answer: str):
            try:
                index = int(answer)
            except ValueError:
                raise ValueError("Enter the number of an option.") from None
            if not 1 <= index <= len(options):
                raise ValueError(f"Choose between 1 and {len(options)}.")
            return options[index - 1][1]

        return self.ask("Choice", default=str(default_index + 1), validate=pick)

    def confirm(self, message: str, default: bool = False) -> bool:
        hint = "Y/n" if default else "y/N"
        while True:
            answer = self._input(f"{message} ({hint}): ").strip().lower()
            if not answer:
                return default
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            print("  Please answer y or n.", file=self._out)
