"""Tests for the analysis session controller."""

import pytest

from skin_lens import build_analysis
from skin_lens.exceptions import NoResultError, SkinLensError, UpstreamError, UpstreamErrorCategory
from skin_lens.session import AnalysisSession, SessionState
from skin_lens.storage import InMemoryStore


def test_successful_submit_stores_result(mocker, png_bytes, advanced_payload):
    analysis = build_analysis(advanced_payload, "advanced")
    analyzer = mocker.Mock(return_value=analysis)
    session = AnalysisSession(InMemoryStore(), analyzer)

    result = session.submit(png_bytes, "image/png", "advanced")

    assert result == analysis
    assert session.state is SessionState.SUCCESS
    assert session.error is None
    assert session.result() == analysis
    analyzer.assert_called_once_with(png_bytes, "image/png", "advanced")


def test_failed_submit_keeps_message_and_drops_old_result(mocker, png_bytes, basic_payload):
    analyzer = mocker.Mock(return_value=build_analysis(basic_payload, "basic"))
    session = AnalysisSession(InMemoryStore(), analyzer)
    session.submit(png_bytes, "image/png", "basic")

    analyzer.side_effect = UpstreamError(UpstreamErrorCategory.NO_FACE_DETECTED)
    result = session.submit(png_bytes, "image/png", "basic")

    assert result is None
    assert session.state is SessionState.FAILURE
    assert session.error.startswith("No face detected")
    with pytest.raises(NoResultError):
        session.result()


def test_unexpected_error_propagates(mocker, png_bytes):
    session = AnalysisSession(InMemoryStore(), mocker.Mock(side_effect=RuntimeError("boom")))

    with pytest.raises(RuntimeError):
        session.submit(png_bytes, "image/png", "basic")

    assert session.state is SessionState.FAILURE


def test_submit_while_submitting_is_rejected(png_bytes):
    session = AnalysisSession(InMemoryStore(), lambda *args: None)
    session.state = SessionState.SUBMITTING

    with pytest.raises(SkinLensError):
        session.submit(png_bytes, "image/png", "basic")


@pytest.mark.parametrize("action", ["reset", "page_hide", "new_analysis"])
def test_reset_actions_clear_everything(mocker, png_bytes, basic_payload, action):
    analyzer = mocker.Mock(return_value=build_analysis(basic_payload, "basic"))
    session = AnalysisSession(InMemoryStore(), analyzer)
    session.submit(png_bytes, "image/png", "basic")

    getattr(session, action)()

    assert session.state is SessionState.IDLE
    with pytest.raises(NoResultError):
        session.result()


def test_existing_result_is_picked_up(mocker, png_bytes, advanced_payload):
    store = InMemoryStore()
    first = AnalysisSession(store, mocker.Mock(return_value=build_analysis(advanced_payload, "advanced")))
    first.submit(png_bytes, "image/png", "advanced")

    session = AnalysisSession(store, mocker.Mock())

    assert session.state is SessionState.SUCCESS
    assert session.result_mode == "advanced"
    assert session.result().skin_type_label == "Combination"


def test_empty_store_starts_idle(mocker):
    session = AnalysisSession(InMemoryStore(), mocker.Mock())

    assert session.state is SessionState.IDLE
    assert session.result_mode is None
