# tests/test_task_board.py

import pytest

from models.errors import StoreError
from models.task import TaskDraft

from .fakes import make_session


def sign_in(board) -> None:
    board.sign_in('lazy@example.com', 'secret')


def test_sign_in_fetches_owned_tasks_newest_first(board, store) -> None:
    sign_in(board)

    assert store.fetch_calls == ['user-lazy']
    assert [t.id for t in board.tasks] == ['2', '1', '3']


def test_initial_session_triggers_fetch(board, store) -> None:
    board.session_manager.restore(make_session())
    assert store.fetch_calls == ['user-lazy']


def test_fetch_failure_keeps_previous_tasks(board, store) -> None:
    sign_in(board)
    before = board.tasks
    board.drain_notices()

    store.fetch_error = StoreError('Network error: connection reset')
    assert board.refresh() is False

    assert board.tasks == before
    (notice,) = board.drain_notices()
    assert notice.level == 'error'
    assert notice.message == 'Error fetching tasks: Network error: connection reset'


def test_toggle_twice_restores_value_with_one_update_each(board, store) -> None:
    sign_in(board)
    was_done = store.get('2').completed

    board.set_completion('2', not was_done)
    assert board.find_task('2').completed is (not was_done)
    board.set_completion('2', was_done)

    assert board.find_task('2').completed is was_done
    assert store.updates == [('2', not was_done), ('2', was_done)]
    # one fetch on sign-in plus one per toggle
    assert len(store.fetch_calls) == 3


def test_set_completion_returns_task_before_update(board) -> None:
    sign_in(board)
    before = board.set_completion('1', True)
    assert before.completed is False


def test_add_task_persists_and_reloads(board, store) -> None:
    sign_in(board)
    board.set_add_form(True)

    board.add_task(TaskDraft(title='Nap', due_date='2025-03-06', due_time='14:00'))

    assert store.created[0].title == 'Nap'
    assert board.tasks[0].title == 'Nap'
    assert board.tasks[0].completed is False
    assert board.view.show_add_task is False
    assert len(store.fetch_calls) == 2


def test_failed_add_keeps_form_open(board, store) -> None:
    sign_in(board)
    board.set_add_form(True)
    store.create_error = StoreError('insert rejected')

    with pytest.raises(StoreError):
        board.add_task(TaskDraft(title='Nap', due_date='2025-03-06'))

    assert board.view.show_add_task is True
    assert len(store.fetch_calls) == 1


def test_immediate_scan_queues_reminders(board) -> None:
    sign_in(board)

    reminders = [n for n in board.drain_notices() if n.level == 'reminder']

    assert len(reminders) == 1
    assert '30 minutes' in reminders[0].message
    assert 'Write report' in reminders[0].message


def test_visible_tasks_follow_view_state(board) -> None:
    sign_in(board)

    assert [t.id for t in board.visible_tasks()] == ['2', '1']
    board.set_search('BALCONY')
    assert [t.id for t in board.visible_tasks()] == ['2']
    board.set_search('')
    board.toggle_history()
    assert [t.id for t in board.visible_tasks()] == ['3']
    board.set_theme(True)
    assert board.view.dark_mode is True


def test_sign_out_clears_tasks_and_timer(board) -> None:
    sign_in(board)
    assert board.poller.running

    board.sign_out()

    assert board.tasks == ()
    assert board.identity is None
    assert not board.poller.running


def test_close_releases_subscription(board, store) -> None:
    board.close()

    sign_in(board)

    assert store.fetch_calls == []
    assert not board.poller.running


def test_resume_from_stored_session_fetches_tasks(board_factory, identity_api, store) -> None:
    first = board_factory()
    sign_in(first)
    stored = first.session_manager.session.to_payload()

    second = board_factory()
    identity = second.resume(stored)

    assert identity.id == 'user-lazy'
    assert identity_api.user_lookups == ['access-1']
    assert second.identity.id == 'user-lazy'
    assert [t.id for t in second.tasks] == ['2', '1', '3']


def test_resume_with_revoked_tokens_stays_signed_out(board, identity_api, store) -> None:
    stored = make_session().to_payload()

    assert board.resume(stored) is None
    assert board.identity is None
    assert store.fetch_calls == []


def test_resume_ignores_unreadable_payload(board, identity_api) -> None:
    assert board.resume({'access_token': 'x'}) is None
    assert identity_api.user_lookups == []
