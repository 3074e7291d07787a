# modules/reminders/routes.py
from flask import jsonify
from . import reminders_bp
from ..boards import current_board


@reminders_bp.route('/poll')
def poll():
    """
    Pending notices for the open page (reminders plus background errors).
    The page polls this and renders each notice once.
    """
    board = current_board()
    if board is None or board.identity is None:
        return jsonify({'ok': False, 'notices': []}), 401

    notices = board.drain_notices()
    return jsonify({
        'ok': True,
        'notices': [n.to_dict() for n in notices],
        'count': len(notices)
    })
