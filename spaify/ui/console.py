import sys
from typing import Optional

from prompt_toolkit.shortcuts import PromptSession

from spaify.log import get_logger
from spaify.ui.base import UIBase, UIClosedError, UserInput

log = get_logger(__name__)


class PlainConsoleUI(UIBase):
    """
    UI adapter for plain (no color) console output.
    """

    async def start(self) -> bool:
        log.debug("Starting console UI")
        return True

    async def stop(self):
        log.debug("Stopping console UI")

    async def send_stream_chunk(self, chunk: Optional[str]):
        if chunk is None:
            # end of stream
            print("", flush=True)
        else:
            print(chunk, end="", flush=True)

    async def send_message(self, message: str):
        print(message)

    async def send_error(self, message: str):
        print(message, file=sys.stderr)

    async def ask_question(
        self,
        question: str,
        *,
        buttons: dict[str, str],
        default: Optional[str] = None,
    ) -> UserInput:
        print(question)

        for k, v in buttons.items():
            default_str = " (default)" if k == default else ""
            print(f"  [{k}]: {v}{default_str}")

        session = PromptSession("> ")

        while True:
            try:
                choice = await session.prompt_async()
                choice = choice.strip()
            except (KeyboardInterrupt, EOFError):
                raise UIClosedError()
            if not choice and default:
                choice = default
            if choice in buttons:
                return UserInput(button=choice)
            print("Please choose one of available options")


__all__ = ["PlainConsoleUI"]
