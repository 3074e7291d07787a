# modules/auth/routes.py
from flask import render_template, request, redirect, url_for, flash, current_app
from . import auth_bp
from models.errors import AuthError
from ..boards import current_board, release_board, remember_session


def _is_login(mode: str) -> bool:
    return (mode or 'login').lower() != 'signup'


@auth_bp.route('/', methods=['GET'])
def login():
    """Sign-in / sign-up form"""
    board = current_board()
    if board is not None and board.identity is not None:
        return redirect(url_for('tasks.index'))

    return render_template('auth/form.html', is_login=_is_login(request.args.get('mode')))


@auth_bp.route('/', methods=['POST'])
def submit():
    email = (request.form.get('email') or '').strip()
    password = request.form.get('password') or ''
    mode = request.form.get('mode') or 'login'

    if not email or not password:
        flash('Email and password are required', 'error')
        return redirect(url_for('auth.login', mode=mode))

    existing = current_board()
    board = existing or current_board(create=True)
    try:
        if _is_login(mode):
            identity = board.sign_in(email, password)
            flash('Welcome back, buddy! 🎉 Ready to tackle some tasks?', 'success')
        else:
            identity = board.sign_up(email, password)
            flash("Welcome to the lazy side! 🦥 Let's get started!", 'success')
            if identity is None:
                flash('Check your inbox to confirm your account, then sign in.', 'info')
                mode = 'login'
    except AuthError as e:
        current_app.logger.info('Auth failed for %s: %s', email, e)
        flash(e.message, 'error')
        identity = None

    if identity is None:
        # a board made only for this attempt is not kept
        if existing is None:
            release_board()
        return redirect(url_for('auth.login', mode=mode))

    remember_session(board)
    return redirect(url_for('tasks.index'))


@auth_bp.route('/signout', methods=['POST'])
def signout():
    board = current_board()
    if board is not None:
        board.sign_out()
    release_board()
    flash('See you later, buddy! 👋', 'success')
    return redirect(url_for('auth.login'))
