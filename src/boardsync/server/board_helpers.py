"""
Board manipulation helpers.

This module provides utility classes for:
- Creating an empty board document
- Looking up tasks and team members
- Applying mutations to a board in place

None of the helpers persist or broadcast anything. Callers obtain a board
from DocumentStore.load(), mutate it here and commit with
DocumentStore.replace().
"""

from typing import Any, Dict, List, Optional

from .constants import BoardKeys

Board = Dict[str, List[Any]]


def empty_board() -> Board:
    """Return a fresh board with no tasks and no team members."""
    return {BoardKeys.TASKS: [], BoardKeys.TEAM_MEMBERS: []}


class BoardNavigator:
    """Helper class for finding items in a board."""

    @staticmethod
    def find_task_index(board: Board, task_id: Any) -> Optional[int]:
        """
        Find the position of a task by id.

        Args:
            board: Board document
            task_id: Task identifier to look up

        Returns:
            Index into board["tasks"], or None if no task matches
        """
        for index, task in enumerate(board[BoardKeys.TASKS]):
            if isinstance(task, dict) and task.get(BoardKeys.TASK_ID) == task_id:
                return index
        return None

    @staticmethod
    def find_task(board: Board, task_id: Any) -> Optional[Dict[str, Any]]:
        """Find a task by id."""
        index = BoardNavigator.find_task_index(board, task_id)
        if index is None:
            return None
        return board[BoardKeys.TASKS][index]

    @staticmethod
    def find_member_index(board: Board, name: Any) -> Optional[int]:
        """Find the position of a team member by name."""
        for index, member in enumerate(board[BoardKeys.TEAM_MEMBERS]):
            if isinstance(member, dict) and member.get(BoardKeys.MEMBER_NAME) == name:
                return index
        return None


class BoardMutator:
    """
    In-place mutations on a board.

    Each method reports whether anything changed so handlers can decide
    whether to commit and broadcast.
    """

    @staticmethod
    def add_task(board: Board, task: Dict[str, Any]) -> bool:
        """
        Append a task.

        Returns:
            False if a task with the same id already exists (board untouched)
        """
        if BoardNavigator.find_task_index(board, task.get(BoardKeys.TASK_ID)) is not None:
            return False
        board[BoardKeys.TASKS].append(task)
        return True

    @staticmethod
    def update_task(board: Board, task: Dict[str, Any]) -> bool:
        """Replace the task with the same id wholesale."""
        index = BoardNavigator.find_task_index(board, task.get(BoardKeys.TASK_ID))
        if index is None:
            return False
        board[BoardKeys.TASKS][index] = task
        return True

    @staticmethod
    def delete_task(board: Board, task_id: Any) -> int:
        """
        Remove every task whose id equals task_id.

        Returns:
            Number of tasks removed
        """
        tasks = board[BoardKeys.TASKS]
        remaining = [
            task for task in tasks
            if not (isinstance(task, dict) and task.get(BoardKeys.TASK_ID) == task_id)
        ]
        removed = len(tasks) - len(remaining)
        board[BoardKeys.TASKS] = remaining
        return removed

    @staticmethod
    def move_task(board: Board, task_id: Any, status: Any) -> bool:
        """Set the status of a task, leaving its other fields untouched."""
        task = BoardNavigator.find_task(board, task_id)
        if task is None:
            return False
        task[BoardKeys.TASK_STATUS] = status
        return True

    @staticmethod
    def add_comment(board: Board, task_id: Any, comment: Any) -> bool:
        """Append a comment to a task's comment sequence."""
        task = BoardNavigator.find_task(board, task_id)
        if task is None:
            return False
        task.setdefault(BoardKeys.TASK_COMMENTS, []).append(comment)
        return True

    @staticmethod
    def upsert_team_member(board: Board, member: Dict[str, Any]) -> List[Any]:
        """
        Insert or replace a team member keyed by name.

        Returns:
            The board's full team member list after the upsert
        """
        members = board[BoardKeys.TEAM_MEMBERS]
        index = BoardNavigator.find_member_index(board, member.get(BoardKeys.MEMBER_NAME))
        if index is None:
            members.append(member)
        else:
            members[index] = member
        return members
