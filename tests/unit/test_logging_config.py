"""Unit tests for logging policies."""

import logging
import os
from unittest.mock import patch

import pytest

from visionary.core import state as st
from visionary.core.image_gen import GenerationOutcome, GenerationStatus
from visionary.logging_config import (
    PROMPT_LOG_MAX,
    QUIET_POLICY,
    ROOT_LOGGER_NAME,
    TRANSITIONS_LOGGER_NAME,
    configure_logging,
    get_logger,
    get_verbosity_from_env,
    log_prompts,
    policy_for,
    prompt_for_log,
    set_verbosity,
)


@pytest.fixture(autouse=True)
def _no_transitions_env():
    with patch.dict(os.environ, {}, clear=False):
        os.environ.pop("VISIONARY_LOG_TRANSITIONS", None)
        yield


@pytest.mark.unit
class TestPolicyFor:
    @pytest.mark.parametrize(
        "level,expected_level,prompts,transitions",
        [
            (-1, logging.INFO, False, False),
            (0, logging.INFO, False, False),
            (1, logging.INFO, True, False),
            (2, logging.DEBUG, True, True),
            (5, logging.DEBUG, True, True),
        ],
    )
    def test_levels(self, level, expected_level, prompts, transitions):
        policy = policy_for(level)
        assert policy.level == expected_level
        assert policy.prompts is prompts
        assert policy.transitions is transitions

    def test_quiet_wins(self):
        assert policy_for(2, quiet=True) is QUIET_POLICY


@pytest.mark.unit
class TestConfigureLogging:
    def test_applies_levels(self):
        configure_logging(verbose_level=1)
        assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.INFO
        assert logging.getLogger(TRANSITIONS_LOGGER_NAME).level == logging.WARNING
        assert log_prompts() is True

    def test_quiet(self):
        configure_logging(verbose_level=1, quiet=True)
        assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.WARNING
        assert log_prompts() is False

    def test_set_verbosity_shortcut(self):
        set_verbosity(2)
        assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.DEBUG
        assert logging.getLogger(TRANSITIONS_LOGGER_NAME).level == logging.INFO

    def test_handler_added_once(self):
        set_verbosity(0)
        set_verbosity(2)
        assert len(logging.getLogger(ROOT_LOGGER_NAME).handlers) == 1

    def test_transitions_switch_at_default_verbosity(self):
        policy = configure_logging(verbose_level=0, transitions=True)
        assert policy.transitions is True
        assert policy.prompts is False
        assert logging.getLogger(TRANSITIONS_LOGGER_NAME).level == logging.INFO

    def test_transitions_from_env(self):
        with patch.dict(os.environ, {"VISIONARY_LOG_TRANSITIONS": "yes"}):
            assert configure_logging(verbose_level=0).transitions is True

    def test_transitions_forced_off(self):
        assert configure_logging(verbose_level=2, transitions=False).transitions is False
        assert logging.getLogger(TRANSITIONS_LOGGER_NAME).level == logging.WARNING


@pytest.mark.unit
class TestRequestStateTransitions:
    def _outcome(self) -> GenerationOutcome:
        return GenerationOutcome(
            status=GenerationStatus.SUCCEEDED,
            model_used="gemini-2.5-flash-image",
            prompt_used="a cat",
            had_reference=False,
            generation_time=0.1,
            data_uri="data:image/png;base64,iVBORw0KGgo=",
        )

    def test_logged_when_enabled(self, caplog):
        configure_logging(verbose_level=0, transitions=True)
        state = st.begin_generation(st.StudioState())
        st.complete_generation(state, self._outcome())
        messages = [r.getMessage() for r in caplog.records if r.name == TRANSITIONS_LOGGER_NAME]
        assert messages == [
            "Request state idle -> requesting",
            "Request state requesting -> done (history 1)",
        ]

    def test_silent_when_disabled(self, caplog):
        configure_logging(verbose_level=0)
        st.abort_generation(st.begin_generation(st.StudioState()))
        assert not [r for r in caplog.records if r.name == TRANSITIONS_LOGGER_NAME]


@pytest.mark.unit
class TestPromptForLog:
    def test_short_prompt_unchanged(self):
        assert prompt_for_log("a cat") == "a cat"

    def test_long_prompt_cut(self):
        out = prompt_for_log("x" * (PROMPT_LOG_MAX + 10))
        assert out.startswith("x" * PROMPT_LOG_MAX + "...")
        assert out.endswith(f"({PROMPT_LOG_MAX + 10} chars)")


@pytest.mark.unit
class TestGetVerbosityFromEnv:
    def test_default_missing(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("VISIONARY_VERBOSITY", None)
            assert get_verbosity_from_env() == 0

    @pytest.mark.parametrize("raw,expected", [("1", 1), (" 2 ", 2), ("3", 0), ("x", 0)])
    def test_values(self, raw, expected):
        with patch.dict(os.environ, {"VISIONARY_VERBOSITY": raw}, clear=False):
            assert get_verbosity_from_env() == expected


@pytest.mark.unit
def test_get_logger_names():
    assert get_logger("foo").name == "visionary.foo"
    assert get_logger("visionary.core.state").name == "visionary.core.state"
