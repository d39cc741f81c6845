from unittest.mock import patch

import pytest

from ppledger.epoch import EpochInfo, EpochManager, SlotTimer

NOW = 1_000_000


@pytest.fixture
def manager():
    mgr = EpochManager(10, 5)
    mgr.genesis_time = 1000
    return mgr


def test_defaults():
    mgr = EpochManager()
    assert mgr.slots_per_epoch == 21600
    assert mgr.slot_duration == 1


def test_initialize_epoch_boundaries(manager):
    manager.initialize_epoch(2, "n2")
    info = manager.get_epoch_info(2)
    assert info.number == 2
    assert info.nonce == "n2"
    assert info.start_slot == 2 * 10
    assert info.end_slot == info.start_slot + 10 - 1
    assert info.start_time == manager.slot_start_time(info.start_slot)
    assert info.end_time == manager.slot_end_time(info.end_slot)
    assert info.end_time - info.start_time == 10 * 5


def test_epoch_zero_starts_at_genesis(manager):
    manager.initialize_epoch(0, "n0")
    assert manager.get_epoch_info(0).start_time == manager.genesis_time


def test_uninitialized_epoch_info_is_computed(manager):
    info = manager.get_epoch_info(3)
    assert not manager.is_epoch_initialized(3)
    assert info.nonce == ""
    assert info.slot_leaders == {}
    assert info.start_slot == 3 * 10


def test_is_epoch_initialized(manager):
    assert manager.is_epoch_initialized(1) is False
    manager.initialize_epoch(1, "n")
    assert manager.is_epoch_initialized(1) is True


def test_slot_leaders(manager):
    manager.initialize_epoch(1, "n")
    manager.set_slot_leader(1, 12, "alice")
    assert manager.get_slot_leader(1, 12) == "alice"
    assert manager.get_slot_leader(1, 13) == ""
    assert manager.get_epoch_info(1).slot_leaders == {12: "alice"}


def test_slot_leader_for_uninitialized_epoch_is_ignored(manager):
    manager.set_slot_leader(4, 40, "bob")
    assert manager.get_slot_leader(4, 40) == ""
    assert not manager.is_epoch_initialized(4)


def test_epoch_info_is_a_copy(manager):
    manager.initialize_epoch(1, "n")
    info = manager.get_epoch_info(1)
    info.slot_leaders[10] = "mallory"
    info.nonce = "changed"
    assert manager.get_slot_leader(1, 10) == ""
    assert manager.get_epoch_info(1).nonce == "n"


def test_finalize_keeps_state(manager):
    manager.initialize_epoch(1, "n")
    manager.finalize_epoch(1, ["h1", "h2"])
    manager.finalize_epoch(9, [])
    assert manager.is_epoch_initialized(1)
    assert not manager.is_epoch_initialized(9)


def test_slot_utilities(manager):
    assert manager.epoch_from_slot(25) == 25 // 10
    assert manager.slot_in_epoch(25) == 25 % 10
    assert manager.slot_end_time(3) - manager.slot_start_time(3) == 5
    assert manager.slot_start_time(0) == 1000


def test_current_slot_and_epoch():
    with patch("time.time", return_value=float(NOW)):
        mgr = EpochManager(10, 5)
        mgr.genesis_time = NOW - 500
        assert mgr.current_slot() == 500 // 5
        assert mgr.current_epoch() == mgr.epoch_from_slot(mgr.current_slot())
        info = mgr.current_epoch_info()
        assert info.start_slot <= mgr.current_slot() <= info.end_slot


def test_current_slot_before_genesis_is_zero():
    with patch("time.time", return_value=float(NOW)):
        mgr = EpochManager(10, 5)
        mgr.genesis_time = NOW + 100
        assert mgr.current_slot() == 0
        assert mgr.current_epoch() == 0


def test_current_epoch_cached_within_same_second():
    with patch("time.time", return_value=float(NOW)):
        mgr = EpochManager(10, 1)
        mgr.genesis_time = NOW - 100
        first = mgr.current_epoch()
        mgr.genesis_time = NOW - 1000
        assert mgr.current_epoch() == first
    with patch("time.time", return_value=float(NOW + 1)):
        assert mgr.current_epoch() == mgr.epoch_from_slot(mgr.current_slot())
        assert mgr.current_epoch() != first


def test_configuration_setters(manager):
    manager.slots_per_epoch = 4
    manager.slot_duration = 2
    manager.genesis_time = 50
    assert (manager.slots_per_epoch, manager.slot_duration, manager.genesis_time) == (4, 2, 50)
    assert manager.epoch_from_slot(9) == 2


def test_epoch_info_defaults():
    info = EpochInfo()
    assert (info.number, info.start_slot, info.end_slot, info.nonce) == (0, 0, 0, "")
    assert info.slot_leaders == {}


def test_slot_timer_start_and_end():
    timer = SlotTimer(5)
    assert timer.slot_start_time(3, 1000) == 1000 + 3 * 5
    assert timer.slot_end_time(3, 1000) == timer.slot_start_time(4, 1000)


def test_slot_timer_is_time_in_slot():
    timer = SlotTimer(5)
    start = timer.slot_start_time(2, 1000)
    assert timer.is_time_in_slot(start, 2, 1000)
    assert timer.is_time_in_slot(start + 4, 2, 1000)
    assert not timer.is_time_in_slot(start + 5, 2, 1000)
    assert not timer.is_time_in_slot(start - 1, 2, 1000)


def test_slot_timer_current_slot():
    timer = SlotTimer(5)
    with patch("time.time", return_value=float(NOW)):
        assert timer.current_time() == NOW
        assert timer.current_slot(NOW - 12) == 12 // 5
        assert timer.current_slot(NOW + 1) == 0


def test_slot_timer_time_until_next_slot():
    timer = SlotTimer(5)
    with patch("time.time", return_value=float(NOW)):
        remaining = timer.time_until_next_slot(NOW - 12)
        assert 0 < remaining <= 5
        assert NOW + remaining == timer.slot_start_time(
            timer.current_slot(NOW - 12) + 1, NOW - 12
        )


def test_slot_timer_time_until_slot():
    timer = SlotTimer(5)
    with patch("time.time", return_value=float(NOW)):
        assert timer.time_until_slot(4, NOW) == 4 * 5
        assert timer.time_until_slot(0, NOW - 30) == -30


def test_slot_timer_duration_setter():
    timer = SlotTimer()
    assert timer.slot_duration == 1
    timer.slot_duration = 7
    assert timer.slot_end_time(0, 0) == 7