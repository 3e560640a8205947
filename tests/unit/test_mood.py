"""Unit tests for mood check-in responses."""

import pytest
from durmah.services.mood import DEFAULT_MOOD_RESPONSE, MOOD_RESPONSES, Mood, get_mood_response


@pytest.mark.parametrize("mood", ["great", "good", "okay", "stressed", "overwhelmed"])
def test_known_moods_map_to_fixed_response(mood):
    assert get_mood_response(mood) == MOOD_RESPONSES[Mood(mood)]


def test_other_gets_default():
    assert get_mood_response("other") == DEFAULT_MOOD_RESPONSE


@pytest.mark.parametrize("mood", ["tired", "Great", "", "   ", None, 7, {"mood": "great"}, ["good"]])
def test_unknown_values_fall_back(mood):
    assert get_mood_response(mood) == DEFAULT_MOOD_RESPONSE


def test_responses_are_distinct():
    responses = list(MOOD_RESPONSES.values())
    assert len(set(responses)) == len(responses)
    assert DEFAULT_MOOD_RESPONSE not in responses


def test_repeated_lookup_is_stable():
    first = [get_mood_response(m.value) for m in Mood]
    second = [get_mood_response(m.value) for m in Mood]
    assert first == second
