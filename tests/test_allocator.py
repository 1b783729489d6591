import pytest

from minitensor.allocator import Allocator
from minitensor.common import GraphError
from minitensor.data_type import DataType

# A Float32 tensor of shape {1, 2, 2, 3} and one of shape {2, 2, 2, 3}.
SMALL = 1 * 2 * 2 * 3 * DataType.FLOAT32.size
LARGE = 2 * 2 * 2 * 3 * DataType.FLOAT32.size


class _RecordingRuntime:
    def __init__(self):
        self.requests = []

    def alloc(self, size):
        self.requests.append(size)
        return bytearray(size)

    def dealloc(self, buffer):
        pass


@pytest.fixture
def allocator():
    return Allocator(_RecordingRuntime())


def test_alloc_reuses_freed_block(allocator):
    offset_a = allocator.alloc(SMALL)
    offset_b = allocator.alloc(SMALL)
    offset_c = allocator.alloc(SMALL)
    allocator.free(offset_b, SMALL)
    offset_d = allocator.alloc(SMALL)
    assert offset_b == offset_d
    assert not (offset_a == 0 and offset_b == 0 and offset_c == 0 and offset_d == 0)


def test_alloc_with_end_free_block(allocator):
    allocator.alloc(SMALL)
    allocator.alloc(SMALL)
    offset_c = allocator.alloc(SMALL)
    allocator.info()
    allocator.free(offset_c, SMALL)
    offset_d = allocator.alloc(LARGE)
    allocator.info()
    assert offset_c == offset_d
    assert allocator.free_blocks == {}


def test_get_ptr_returns_same_buffer():
    runtime = _RecordingRuntime()
    allocator = Allocator(runtime)
    for _ in range(4):
        allocator.alloc(SMALL)
    ptr1 = allocator.get_ptr()
    ptr2 = allocator.get_ptr()
    assert ptr1 is ptr2
    assert runtime.requests == [4 * SMALL]


def test_sizes_are_aligned_to_eight(allocator):
    assert allocator.alloc(1) == 0
    assert allocator.alloc(1) == 8
    assert allocator.peak == 16
    assert allocator.used == 16


def test_freeing_last_block_shrinks_peak(allocator):
    allocator.alloc(SMALL)
    last = allocator.alloc(SMALL)
    allocator.free(last, SMALL)
    assert allocator.peak == SMALL
    assert allocator.used == SMALL


def test_free_merges_with_preceding_block(allocator):
    offsets = [allocator.alloc(SMALL) for _ in range(4)]
    allocator.free(offsets[0], SMALL)
    allocator.free(offsets[1], SMALL)
    assert allocator.free_blocks == {0: 2 * SMALL}
    assert allocator.used == 2 * SMALL


def test_free_merges_with_following_block(allocator):
    offsets = [allocator.alloc(SMALL) for _ in range(4)]
    allocator.free(offsets[1], SMALL)
    allocator.free(offsets[0], SMALL)
    assert allocator.free_blocks == {0: 2 * SMALL}


def test_partial_reuse_takes_tail_of_block(allocator):
    offsets = [allocator.alloc(SMALL) for _ in range(3)]
    allocator.free(offsets[0], SMALL)
    taken = allocator.alloc(8)
    assert taken == SMALL - 8
    assert allocator.free_blocks == {0: SMALL - 8}


def test_alloc_after_get_ptr_raises(allocator):
    allocator.alloc(SMALL)
    allocator.get_ptr()
    with pytest.raises(GraphError):
        allocator.alloc(SMALL)


def test_free_after_get_ptr_raises(allocator):
    offset = allocator.alloc(SMALL)
    allocator.get_ptr()
    with pytest.raises(GraphError):
        allocator.free(offset, SMALL)


def test_info_reports_usage(allocator, capsys):
    allocator.alloc(SMALL)
    allocator.info()
    out = capsys.readouterr().out
    assert out == f"Used memory: {SMALL}, peak memory: {SMALL}\n"