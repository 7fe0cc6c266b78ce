from typing import Optional

from pydantic import BaseModel


class UIClosedError(Exception):
    """The user interface has been closed (user interrupted the command)."""


class UserInput(BaseModel):
    """
    Represents user input.

    See also: `UIBase.ask_question()`

    Attributes:
    * `button`: Name (key) of the button the user selected.
    """

    button: Optional[str] = None


class UIBase:
    """
    Base class for UI adapters.
    """

    async def start(self) -> bool:
        """
        Start the UI adapter.

        :return: Whether the UI was started successfully.
        """
        raise NotImplementedError()

    async def stop(self):
        """
        Stop the UI adapter.
        """
        raise NotImplementedError()

    async def send_stream_chunk(self, chunk: Optional[str]):
        """
        Send a chunk of command output to the UI.

        :param chunk: Chunk of the output, or None to end the stream.
        """
        raise NotImplementedError()

    async def send_message(self, message: str):
        """
        Send a progress or informational message to the UI.

        :param message: Message content.
        """
        raise NotImplementedError()

    async def send_error(self, message: str):
        """
        Send an error message to the UI.

        :param message: Error message (for example, a failed command's output).
        """
        raise NotImplementedError()

    async def ask_question(
        self,
        question: str,
        *,
        buttons: dict[str, str],
        default: Optional[str] = None,
    ) -> UserInput:
        """
        Ask the user to choose one of the buttons.

        The UI should use the item values as button labels, and item
        keys as the values to return.

        :param question: Question to ask.
        :param buttons: Buttons to display.
        :param default: Button to choose if the user provides no input.
        :return: User input.
        """
        raise NotImplementedError()


__all__ = ["UIBase", "UIClosedError", "UserInput"]
