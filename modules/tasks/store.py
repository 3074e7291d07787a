# modules/tasks/store.py
"""
Task Store Adapter
Translates between the row store's "tasks" table and in-memory Task objects

Wire columns: id, title, description, due_date, priority, time_allotted,
category, completed, created_at, user_id
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from models.errors import StoreError
from models.task import Task, TaskDraft
from ..backend_api import BackendAPI


def row_to_task(row: Dict[str, Any]) -> Task:
    """Map one wire row onto a Task"""
    return Task(
        id=str(row['id']),
        title=row.get('title') or '',
        description=row.get('description') or '',
        due_date=row.get('due_date') or '',
        priority=(row.get('priority') or 'medium').lower(),
        time_allotted=row.get('time_allotted') or '',
        category=(row.get('category') or '').lower(),
        completed=bool(row.get('completed', False)),
        created_at=row.get('created_at') or '',
        user_id=str(row['user_id']) if row.get('user_id') is not None else None,
    )


def draft_to_row(owner_id: str, draft: TaskDraft, created_at: str) -> Dict[str, Any]:
    """Map a new task onto the insert payload"""
    return {
        'user_id': owner_id,
        'title': draft.title,
        'description': draft.description,
        'due_date': draft.due_date_time,
        'priority': draft.priority,
        'time_allotted': draft.time_allotted,
        'category': draft.category,
        'completed': False,
        'created_at': created_at,
    }


class TaskStore(BackendAPI):
    """
    Row-store operations for one signed-in user.
    `token_provider` returns the current access token so per-user row
    filtering applies on the service side.
    """

    service_path = '/rest/v1'
    error_cls = StoreError

    def __init__(self, *args, table: str = 'tasks',
                 token_provider: Callable[[], Optional[str]] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.table = table
        self.token_provider = token_provider or (lambda: None)

    def fetch(self, owner_id: str) -> List[Task]:
        """All tasks of one owner, newest creation first"""
        rows = self._api_call('GET', f'/{self.table}', params={
            'select': '*',
            'user_id': f'eq.{owner_id}',
            'order': 'created_at.desc',
        }, access_token=self.token_provider())
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise StoreError('Unexpected response while fetching tasks')
        try:
            return [row_to_task(r) for r in rows]
        except (KeyError, TypeError):
            raise StoreError('Malformed task row')

    def create(self, owner_id: str, draft: TaskDraft) -> None:
        created_at = datetime.now(timezone.utc).isoformat()
        self._api_call('POST', f'/{self.table}',
                       payload=[draft_to_row(owner_id, draft, created_at)],
                       access_token=self.token_provider(),
                       headers={'Prefer': 'return=minimal'})

    def set_completion(self, task_id: str, completed: bool) -> None:
        """Update only the completed flag; an id matching no row is an error"""
        rows = self._api_call('PATCH', f'/{self.table}',
                              params={'id': f'eq.{task_id}'},
                              payload={'completed': bool(completed)},
                              access_token=self.token_provider(),
                              headers={'Prefer': 'return=representation'})
        if not rows:
            raise StoreError(f'Task {task_id} not found')
