"""
Tests for the conflict policy — download, install or abort.
"""

import pytest

from src.core.models.action import Action
from src.core.services.policy import (
    CONFLICT_CHOICES,
    DEFAULT_CHOICE,
    ConflictPolicy,
    choice_to_action,
    decide,
)

KEY = "org.example.foobar"


def never_asked(message, options, default):
    raise AssertionError("prompt should not be called")


def answering(answer):
    asked = []

    def prompt(message, options, default):
        asked.append((message, options, default))
        return answer

    prompt.asked = asked
    return prompt


class TestDecideWithoutPrompt:
    @pytest.mark.parametrize("keep,force", [
        (False, False), (True, False), (False, True), (True, True),
    ])
    def test_not_installed_downloads(self, keep, force):
        policy = ConflictPolicy(keep=keep, force=force)
        assert decide(KEY, set(), policy, never_asked) == Action.DOWNLOAD

    def test_keep_installs(self):
        assert decide(KEY, {KEY}, ConflictPolicy(keep=True), never_asked) == Action.INSTALL

    def test_force_downloads(self):
        assert decide(KEY, {KEY}, ConflictPolicy(force=True), never_asked) == Action.DOWNLOAD

    def test_keep_wins_over_force(self):
        policy = ConflictPolicy(keep=True, force=True)
        assert decide(KEY, {KEY}, policy, never_asked) == Action.INSTALL


class TestDecideInteractive:
    @pytest.mark.parametrize("answer,expected", [
        ("k", Action.INSTALL),
        ("d", Action.DOWNLOAD),
        ("a", Action.ABORT),
        ("D", Action.DOWNLOAD),
        (None, Action.ABORT),
        ("", Action.ABORT),
        ("x", Action.ABORT),
    ])
    def test_answers(self, answer, expected):
        assert decide(KEY, {KEY}, ConflictPolicy(), answering(answer)) == expected

    def test_prompt_offers_three_choices_defaulting_to_keep(self):
        prompt = answering("k")
        decide(KEY, {KEY}, ConflictPolicy(), prompt)

        (message, options, default), = prompt.asked
        assert KEY in message
        assert list(options) == ["k", "d", "a"]
        assert default == "k"
        assert options == CONFLICT_CHOICES
        assert DEFAULT_CHOICE == "k"


class TestChoiceToAction:
    def test_whitespace_is_ignored(self):
        assert choice_to_action(" d ") == Action.DOWNLOAD
