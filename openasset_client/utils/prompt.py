"""Interactive confirmation for risky field updates."""

from enum import Enum
from typing import Callable, Optional

from openasset_client.models import UserAbort

# Display types that show a single value even though every keyword becomes an option
RESTRICTED_LIST_FIELD_TYPES = frozenset({"suggestion", "fixedSuggestion", "option"})

RESTRICTED_FIELD_WARNING = (
    "Warning: You are inserting keywords into a restricted field type. "
    "\n     Project keywords are sorted in alphabetical order. "
    "\n     All file keywords will be created as options but only the first one "
    "will be displayed in the field."
    "\nContinue? (Yes/no)\n> "
)

INVALID_ANSWER = '\nInvalid input. Please enter "yes" or "no".\n> '


class GateState(str, Enum):
    """States of the confirmation prompt."""
    PROMPTING = "prompting"
    CONFIRMED = "confirmed"
    ABORTED = "aborted"


def is_restricted_display_type(display_type: Optional[str]) -> bool:
    return display_type in RESTRICTED_LIST_FIELD_TYPES


class ConfirmationGate:
    """Asks the operator to confirm before writing into a restricted field.

    ``read_line`` and ``write`` default to ``input`` and ``print`` and are
    replaced in tests.
    """

    def __init__(
        self,
        read_line: Callable[[], str] = input,
        write: Optional[Callable[[str], None]] = None,
    ):
        self.read_line = read_line
        self.write = write or (lambda text: print(text, end="", flush=True))
        self.state = GateState.PROMPTING

    def confirm(self, message: str = RESTRICTED_FIELD_WARNING) -> GateState:
        """Prompt until the answer is yes or no.

        Raises:
            UserAbort: If the operator answers "no" or "n", or input is closed
        """
        self.state = GateState.PROMPTING
        self.write(message)
        answer = None

        while self.state == GateState.PROMPTING:
            if answer is not None:
                self.write(INVALID_ANSWER)

            try:
                answer = self.read_line().strip()
            except EOFError:
                self.state = GateState.ABORTED
                raise UserAbort("No answer received. Exiting.") from None
            normalized = answer.lower()

            if normalized in ("no", "n"):
                self.state = GateState.ABORTED
                raise UserAbort(f"You entered {answer!r}. Exiting.")

            if normalized in ("yes", "y"):
                self.state = GateState.CONFIRMED

        return self.state
