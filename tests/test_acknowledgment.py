# tests/test_acknowledgment.py

import asyncio
import time

import pytest

from masjid_console.services.realtime.acknowledgment import (
    AckResult,
    AcknowledgmentProtocol,
    ChannelNotConnectedError,
)
from masjid_console.services.realtime.summary import summarize_ack


def _broadcast(protocol, kind='reload', text="Iqamaah times updated", timeout=None, **kwargs):
    started = time.monotonic()
    result = asyncio.run(protocol.broadcast(kind, text, timeout=timeout, **kwargs))
    return result, time.monotonic() - started


def test_early_ack_resolves_before_deadline(fake_channel_factory):
    channel = fake_channel_factory(acks=[(0.01, {'clientId': "display-1"})])
    protocol = AcknowledgmentProtocol(channel, timeout=15, early_exit=0.05)

    result, elapsed = _broadcast(protocol)

    assert result.success is True
    assert result.timed_out is False
    assert result.responses == [{'clientId': "display-1"}]
    assert elapsed < 1


def test_silent_broadcast_times_out_at_deadline(fake_channel_factory):
    channel = fake_channel_factory()
    protocol = AcknowledgmentProtocol(channel, timeout=0.2, early_exit=0.05)

    result, elapsed = _broadcast(protocol)

    assert result.success is False
    assert result.timed_out is True
    assert result.responses == []
    assert elapsed >= 0.19


def test_ack_after_checkpoint_waits_for_deadline(fake_channel_factory):
    channel = fake_channel_factory(acks=[(0.1, {'clientId': "slow-display"})])
    protocol = AcknowledgmentProtocol(channel, timeout=0.3, early_exit=0.05)

    result, elapsed = _broadcast(protocol)

    assert result.success is True
    assert result.timed_out is True
    assert result.response_count == 1
    assert elapsed >= 0.29


def test_acks_after_resolution_are_not_counted(fake_channel_factory):
    channel = fake_channel_factory(acks=[(0.01, {'clientId': "a"}), (0.2, {'clientId': "late"})])
    protocol = AcknowledgmentProtocol(channel, timeout=5, early_exit=0.05)

    async def run():
        result = await protocol.broadcast('reload', "Banners uploaded successfully")
        await asyncio.sleep(0.25)
        return result

    result = asyncio.run(run())

    assert [r['clientId'] for r in result.responses] == ["a"]
    assert channel.listener_count('client:ack') == 0


def test_not_connected_fails_without_emitting(fake_channel_factory):
    channel = fake_channel_factory(connected=False)
    protocol = AcknowledgmentProtocol(channel, timeout=0.2, early_exit=0.05)

    with pytest.raises(ChannelNotConnectedError):
        _broadcast(protocol)

    assert channel.emitted == []
    assert channel.listener_count('client:ack') == 0


def test_unknown_kind_is_rejected(fake_channel_factory):
    protocol = AcknowledgmentProtocol(fake_channel_factory(), timeout=0.2, early_exit=0.05)

    with pytest.raises(ValueError, match="Unknown command kind"):
        _broadcast(protocol, kind='reboot')


def test_command_payload_shapes(fake_channel_factory):
    channel = fake_channel_factory(acks=[(0.0, {})])
    protocol = AcknowledgmentProtocol(channel, timeout=1, early_exit=0.02)

    _broadcast(protocol, kind='reload', text="Config changed")
    _broadcast(protocol, kind='announce', text="Eid prayer at 8:00")

    (reload_event, reload_payload), (announce_event, announce_payload) = channel.emitted
    assert reload_event == announce_event == 'command:broadcast'
    assert reload_payload['kind'] == 'reload'
    assert reload_payload['reason'] == "Config changed"
    assert announce_payload['kind'] == 'announce'
    assert announce_payload['text'] == "Eid prayer at 8:00"
    assert 'T' in reload_payload['timestamp']


def test_explicit_timeout_overrides_default(fake_channel_factory):
    protocol = AcknowledgmentProtocol(fake_channel_factory(), timeout=30, early_exit=0.02)

    result, elapsed = _broadcast(protocol, timeout=0.1)

    assert result.timed_out is True
    assert elapsed < 5


def test_session_can_be_cancelled(fake_channel_factory):
    channel = fake_channel_factory(acks=[(0.1, {'clientId': "a"})])
    protocol = AcknowledgmentProtocol(channel, timeout=30, early_exit=10)
    sessions = []

    async def run():
        task = asyncio.ensure_future(protocol.broadcast('announce', "Jumuah moved", session_holder=sessions))
        await asyncio.sleep(0.2)
        sessions[0].cancel()
        return await task

    started = time.monotonic()
    result = asyncio.run(run())

    assert time.monotonic() - started < 5
    assert result.timed_out is True
    assert result.success is True
    assert result.response_count == 1


def test_abandoned_broadcast_detaches_listener(fake_channel_factory):
    channel = fake_channel_factory()
    protocol = AcknowledgmentProtocol(channel, timeout=30, early_exit=10)

    async def run():
        task = asyncio.ensure_future(protocol.broadcast('reload', "x"))
        await asyncio.sleep(0.05)
        assert channel.listener_count('client:ack') == 1
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(run())

    assert channel.listener_count('client:ack') == 0


def test_result_to_dict():
    result = AckResult(success=True, timed_out=False, responses=[{'clientId': "a"}])
    assert result.to_dict() == {
        'success': True,
        'timedOut': False,
        'responses': [{'clientId': "a"}],
        'count': 1,
    }


@pytest.mark.parametrize("success, timed_out, responses, level, message", [
    (True, False, [{}, {}], 'success', "Operation successful! and 2 client(s) refreshed."),
    (True, True, [{}], 'success', "Operation successful! 1 client(s) responded before timeout."),
    (False, True, [], 'warning', "Operation successful but no clients responded within 15 seconds."),
])
def test_summarize_ack(success, timed_out, responses, level, message):
    summary = summarize_ack(AckResult(success, timed_out, responses), 15.0)
    assert summary == {'message': message, 'level': level}
