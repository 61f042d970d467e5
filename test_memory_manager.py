import pytest

from errors import SimulationError
from memory_manager import PhysicalMemory, Statistics


def test_allocates_in_ascending_order():
    memory = PhysicalMemory(num_frames=3)
    assert [memory.allocate_free_frame() for _ in range(3)] == [0, 1, 2]
    assert memory.is_full()
    assert memory.occupied_count() == 3


def test_search_resumes_after_last_allocated():
    memory = PhysicalMemory(num_frames=4)
    memory.allocate_free_frame()
    memory.allocate_free_frame()
    memory.release(0)

    # Frame 0 is free but the cursor is past it
    assert memory.allocate_free_frame() == 2
    assert memory.allocate_free_frame() == 3
    assert memory.allocate_free_frame() == 0


def test_free_count_is_tracked():
    memory = PhysicalMemory(num_frames=2)
    assert memory.num_free_frames == 2
    frame = memory.allocate_free_frame()
    assert memory.num_free_frames == 1
    assert memory.has_free_frame()
    memory.release(frame)
    assert memory.num_free_frames == 2
    assert not memory.is_occupied(frame)


def test_allocate_when_full_raises():
    memory = PhysicalMemory(num_frames=1)
    memory.allocate_free_frame()
    with pytest.raises(SimulationError):
        memory.allocate_free_frame()


def test_release_free_frame_raises():
    memory = PhysicalMemory(num_frames=2)
    with pytest.raises(SimulationError):
        memory.release(1)


def test_num_frames_must_be_positive():
    with pytest.raises(ValueError):
        PhysicalMemory(num_frames=0)


def test_statistics_counts():
    stats = Statistics()
    stats.record_page_fault()
    stats.record_hit()
    stats.record_page_fault(evicted=True, is_dirty_replacement=True)
    stats.record_page_fault(evicted=True)

    assert stats.accesses == 4
    assert stats.hits == 1
    assert stats.page_faults == 3
    assert stats.evictions == 2
    assert stats.dirty_writes == 1
    assert stats.disk_accesses == 4
    assert stats.fault_rate == pytest.approx(0.75)
    assert "Page Faults: 3" in str(stats)


def test_empty_statistics_fault_rate():
    assert Statistics().fault_rate == 0.0
