# tests/test_boards.py

from modules.boards import BoardRegistry


class StubBoard:

    def __init__(self):
        self.closed = False

    def close(self) -> None:
        self.closed = True


class Ticker:

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def make_registry(idle_seconds=60):
    ticker = Ticker()
    return BoardRegistry(StubBoard, idle_seconds=idle_seconds, clock=ticker), ticker


def test_idle_boards_are_closed() -> None:
    registry, ticker = make_registry()
    board_id, board = registry.create()

    ticker.now += 61

    assert registry.evict_idle() == 1
    assert board.closed
    assert registry.get(board_id) is None
    assert len(registry) == 0


def test_access_keeps_a_board_alive() -> None:
    registry, ticker = make_registry()
    kept_id, kept = registry.create()
    _, dropped = registry.create()

    ticker.now += 40
    registry.get(kept_id)
    ticker.now += 40

    assert registry.evict_idle() == 1
    assert dropped.closed
    assert not kept.closed
    assert registry.get(kept_id) is kept


def test_no_idle_limit_never_evicts() -> None:
    registry, ticker = make_registry(idle_seconds=None)
    _, board = registry.create()

    ticker.now += 10 ** 6

    assert registry.evict_idle() == 0
    assert not board.closed


def test_discard_and_close_all_close_boards() -> None:
    registry, _ = make_registry()
    first_id, first = registry.create()
    _, second = registry.create()

    registry.discard(first_id)
    registry.discard(first_id)
    assert first.closed and not second.closed

    registry.close_all()
    assert second.closed
    assert len(registry) == 0
