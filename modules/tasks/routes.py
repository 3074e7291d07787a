# modules/tasks/routes.py
from flask import request, render_template, redirect, url_for, flash, current_app
from . import tasks_bp
from models.errors import AuthError, StoreError
from models.task import TaskDraft, PRIORITY_LEVELS, TASK_CATEGORIES, DEFAULT_DUE_TIME
from .presentation import completion_message, empty_text
from ..boards import current_board, dark_mode, set_dark_mode


def _signed_in_board():
    """The caller's board, or None when nobody is signed in"""
    board = current_board()
    if board is None or board.identity is None:
        return None
    return board


def _back_to_board():
    """Redirect to the board, carrying the search box along when the form sent it"""
    if 'q' in request.form:
        return redirect(url_for('tasks.index', q=request.form.get('q', '').strip()))
    return redirect(url_for('tasks.index'))


# ==================== BOARD ====================

@tasks_bp.get('/')
def index():
    board = _signed_in_board()
    if board is None:
        return redirect(url_for('auth.login'))

    # Search text comes from the query string; absent means keep the last one
    if 'q' in request.args:
        board.set_search(request.args.get('q', '').strip())

    view = board.view
    return render_template('tasks/index.html',
                           tasks=board.visible_tasks(),
                           view=view,
                           identity=board.identity,
                           notices=board.drain_notices(),
                           empty_text=empty_text(view.show_history),
                           priorities=PRIORITY_LEVELS,
                           categories=TASK_CATEGORIES,
                           default_due_time=DEFAULT_DUE_TIME,
                           active='tasks')


# ==================== ACTIONS ====================

@tasks_bp.post('/add')
def add():
    board = _signed_in_board()
    if board is None:
        return redirect(url_for('auth.login'))

    try:
        draft = TaskDraft.from_form(request.form)
    except ValueError as e:
        flash(str(e), 'error')
        board.set_add_form(True)
        return _back_to_board()

    try:
        board.add_task(draft)
    except (AuthError, StoreError) as e:
        current_app.logger.warning('Add task failed: %s', e)
        flash(f'Error adding task: {e.message}', 'error')
        return _back_to_board()

    flash('Task added successfully! 🎯', 'success')
    return _back_to_board()


@tasks_bp.post('/<task_id>/toggle')
def toggle(task_id):
    """Set completion to the submitted value (the opposite of what the row showed)"""
    board = _signed_in_board()
    if board is None:
        return redirect(url_for('auth.login'))

    completed = (request.form.get('completed') or '').lower() in ('1', 'true', 'on', 'yes')

    try:
        before = board.set_completion(task_id, completed)
    except (AuthError, StoreError) as e:
        current_app.logger.warning('Toggle task %s failed: %s', task_id, e)
        flash(f'Error updating task: {e.message}', 'error')
        return _back_to_board()

    if completed:
        flash(completion_message(before, board.clock()), 'success')
    return _back_to_board()


# ==================== VIEW TOGGLES ====================

@tasks_bp.post('/view/history')
def toggle_history():
    board = _signed_in_board()
    if board is None:
        return redirect(url_for('auth.login'))
    board.toggle_history()
    return _back_to_board()


@tasks_bp.post('/view/theme')
def toggle_theme():
    set_dark_mode(not dark_mode())
    if _signed_in_board() is None:
        return redirect(url_for('auth.login'))
    return _back_to_board()


@tasks_bp.post('/view/add-form')
def add_form():
    board = _signed_in_board()
    if board is None:
        return redirect(url_for('auth.login'))
    board.set_add_form(request.form.get('open', '1') == '1')
    return _back_to_board()
