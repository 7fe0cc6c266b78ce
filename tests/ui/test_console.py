from unittest.mock import AsyncMock, patch

import pytest

from spaify.ui.base import UIClosedError
from spaify.ui.console import PlainConsoleUI


@pytest.mark.asyncio
async def test_send_message(capsys):
    ui = PlainConsoleUI()

    connected = await ui.start()
    assert connected is True
    await ui.send_message("Setting up default files.")
    await ui.send_error("npm ERR! code E404")

    captured = capsys.readouterr()
    assert captured.out == "Setting up default files.\n"
    assert captured.err == "npm ERR! code E404\n"
    await ui.stop()


@pytest.mark.asyncio
async def test_stream(capsys):
    ui = PlainConsoleUI()

    await ui.start()
    for chunk in ["added ", "23 ", "packages"]:
        await ui.send_stream_chunk(chunk)
    await ui.send_stream_chunk(None)

    captured = capsys.readouterr()
    assert captured.out == "added 23 packages\n"
    await ui.stop()


@pytest.mark.asyncio
@patch("spaify.ui.console.PromptSession")
async def test_ask_question_buttons(mock_PromptSession, capsys):
    prompt_async = mock_PromptSession.return_value.prompt_async = AsyncMock(side_effect=["maybe", "yes"])

    ui = PlainConsoleUI()
    answer = await ui.ask_question(
        "Overwrite?",
        buttons={"yes": "Yes", "no": "No"},
        default="no",
    )

    assert answer.button == "yes"
    assert prompt_async.await_count == 2
    out = capsys.readouterr().out
    assert "  [no]: No (default)" in out
    assert "Please choose one of available options" in out


@pytest.mark.asyncio
@patch("spaify.ui.console.PromptSession")
async def test_ask_question_default(mock_PromptSession):
    mock_PromptSession.return_value.prompt_async = AsyncMock(return_value="  ")

    ui = PlainConsoleUI()
    answer = await ui.ask_question("Overwrite?", buttons={"yes": "Yes", "no": "No"}, default="no")

    assert answer.button == "no"


@pytest.mark.asyncio
@patch("spaify.ui.console.PromptSession")
async def test_ask_question_interrupted(mock_PromptSession):
    mock_PromptSession.return_value.prompt_async = AsyncMock(side_effect=KeyboardInterrupt())

    ui = PlainConsoleUI()
    with pytest.raises(UIClosedError):
        await ui.ask_question("Overwrite?", buttons={"yes": "Yes", "no": "No"})
