"""Tests for PollDialogue."""

from unittest.mock import AsyncMock

import pytest

from roboclic.dialogue.poll import QUOTE_PROMPT, TARGET_PROMPT
from roboclic.models import CallbackSelection, ChooseTarget, SetQuote, Start
from roboclic.quiz import QuizCompositionError


def selection(data, message_id=100, chat_id="chat1"):
    return CallbackSelection(
        chat_id=chat_id,
        callback_id="cb1",
        data=data,
        sender_id="u1",
        message_id=message_id,
    )


class TestPollDialogueStart:
    """Tests for PollDialogue.start()."""

    async def test_start_sends_chooser(
        self, poll_dialogue, dialogues, mock_messenger, committee, make_message
    ):
        """Test that /poll is removed and a chooser is sent."""
        await poll_dialogue.start(make_message("/poll", message_id=7))

        mock_messenger.delete_message.assert_awaited_once_with("chat1", 7)
        mock_messenger.send_choice.assert_awaited_once_with(
            "chat1", TARGET_PROMPT, ["Alice", "Bob", "Carol"]
        )
        assert dialogues.get("chat1") == ChooseTarget(message_id=100)

    async def test_start_with_empty_committee(
        self, poll_dialogue, dialogues, mock_messenger, make_message
    ):
        """Test that an empty committee still gives an (empty) chooser."""
        await poll_dialogue.start(make_message("/poll"))

        mock_messenger.send_choice.assert_awaited_once_with("chat1", TARGET_PROMPT, [])
        assert isinstance(dialogues.get("chat1"), ChooseTarget)

    async def test_restart_removes_stale_prompt(
        self, poll_dialogue, dialogues, mock_messenger, committee, make_message
    ):
        """Test that /poll during a pending dialogue starts over."""
        dialogues.set("chat1", SetQuote(message_id=55, target="Bob"))

        await poll_dialogue.start(make_message("/poll", message_id=8))

        deleted = [c.args for c in mock_messenger.delete_message.await_args_list]
        assert ("chat1", 55) in deleted
        assert ("chat1", 8) in deleted
        assert dialogues.get("chat1") == ChooseTarget(message_id=100)


class TestPollDialogueChooseTarget:
    """Tests for PollDialogue.choose_target()."""

    async def test_choose_target_asks_for_quote(
        self, poll_dialogue, dialogues, mock_messenger
    ):
        """Test that the chooser is replaced by the quote prompt."""
        state = ChooseTarget(message_id=50)
        dialogues.set("chat1", state)

        await poll_dialogue.choose_target(selection("Bob", message_id=50), state)

        mock_messenger.answer_selection.assert_awaited_once_with("cb1")
        mock_messenger.delete_message.assert_awaited_once_with("chat1", 50)
        mock_messenger.send_message.assert_awaited_once_with("chat1", QUOTE_PROMPT)
        assert dialogues.get("chat1") == SetQuote(message_id=100, target="Bob")

    async def test_stale_keyboard_is_ignored(
        self, poll_dialogue, dialogues, mock_messenger
    ):
        """Test that a press on an older chooser changes nothing."""
        state = ChooseTarget(message_id=50)
        dialogues.set("chat1", state)

        await poll_dialogue.choose_target(selection("Bob", message_id=49), state)

        mock_messenger.answer_selection.assert_awaited_once_with("cb1")
        mock_messenger.delete_message.assert_not_awaited()
        assert dialogues.get("chat1") == state


class TestPollDialogueSetQuote:
    """Tests for PollDialogue.set_quote()."""

    async def test_set_quote_sends_quiz(
        self, poll_dialogue, dialogues, mock_messenger, storage, committee, make_message
    ):
        """Test that the quiz is sent and the target counted."""
        state = SetQuote(message_id=60, target="Carol")
        dialogues.set("chat1", state)

        await poll_dialogue.set_quote(make_message("On verra", message_id=61), state)

        deleted = [c.args for c in mock_messenger.delete_message.await_args_list]
        assert deleted == [("chat1", 60), ("chat1", 61)]

        chat_id, question, options, correct_index = mock_messenger.send_quiz.await_args.args
        assert chat_id == "chat1"
        assert question == 'Qui a dit: "On verra" ?'
        assert sorted(options) == committee
        assert options[correct_index] == "Carol"

        counts = {m.name: m.poll_count for m in await storage.list_members()}
        assert counts == {"Alice": 0, "Bob": 0, "Carol": 1}
        assert dialogues.get("chat1") == Start()

    async def test_message_without_text_is_ignored(
        self, poll_dialogue, dialogues, mock_messenger, make_message
    ):
        """Test that a sticker or photo does not end the dialogue."""
        state = SetQuote(message_id=60, target="Carol")
        dialogues.set("chat1", state)

        await poll_dialogue.set_quote(make_message(None), state)

        mock_messenger.delete_message.assert_not_awaited()
        mock_messenger.send_quiz.assert_not_awaited()
        assert dialogues.get("chat1") == state

    async def test_target_left_committee(
        self, poll_dialogue, dialogues, mock_messenger, committee, make_message
    ):
        """Test that a vanished target aborts and resets the dialogue."""
        state = SetQuote(message_id=60, target="Zoe")
        dialogues.set("chat1", state)

        with pytest.raises(QuizCompositionError):
            await poll_dialogue.set_quote(make_message("Hello"), state)

        mock_messenger.send_quiz.assert_not_awaited()
        assert dialogues.get("chat1") == Start()

    async def test_failed_send_resets_dialogue(
        self, poll_dialogue, dialogues, mock_messenger, storage, committee, make_message
    ):
        """Test that the dialogue ends even when the quiz cannot be sent."""
        state = SetQuote(message_id=60, target="Carol")
        dialogues.set("chat1", state)
        mock_messenger.send_quiz = AsyncMock(side_effect=RuntimeError("Telegram is down"))

        with pytest.raises(RuntimeError):
            await poll_dialogue.set_quote(make_message("On verra"), state)

        assert dialogues.get("chat1") == Start()
        counts = {m.name: m.poll_count for m in await storage.list_members()}
        assert counts["Carol"] == 0

    async def test_failed_delete_resets_dialogue(
        self, poll_dialogue, dialogues, mock_messenger, committee, make_message
    ):
        state = SetQuote(message_id=60, target="Carol")
        dialogues.set("chat1", state)
        mock_messenger.delete_message = AsyncMock(side_effect=RuntimeError("message not found"))

        with pytest.raises(RuntimeError):
            await poll_dialogue.set_quote(make_message("On verra"), state)

        assert dialogues.get("chat1") == Start()


class TestPollDialogueFullRun:
    """Tests for a whole dialogue."""

    async def test_full_dialogue(
        self, poll_dialogue, dialogues, mock_messenger, storage, committee, make_message
    ):
        """Test start, choice and quote in sequence."""
        assert dialogues.get("chat1") == Start()

        await poll_dialogue.start(make_message("/poll", message_id=1))
        chooser = dialogues.get("chat1")
        assert isinstance(chooser, ChooseTarget)

        await poll_dialogue.choose_target(
            selection("Alice", message_id=chooser.message_id), chooser
        )
        asking = dialogues.get("chat1")
        assert asking == SetQuote(message_id=101, target="Alice")

        await poll_dialogue.set_quote(make_message("Bonjour", message_id=2), asking)

        assert dialogues.get("chat1") == Start()
        counts = {m.name: m.poll_count for m in await storage.list_members()}
        assert counts == {"Alice": 1, "Bob": 0, "Carol": 0}
