"""In-process IssueSink, for embedding and tests."""

import copy
from typing import Any, Dict, List, Optional, Tuple

from ..models import Comment, ExtensionTarget
from .base import IssueSink, StoredIssue


class MemoryIssueSink(IssueSink):
    """Keeps everything in lists and dicts; a rollback restores a snapshot.

    Reads behave like ``SqliteIssueSink``: comments and issues come from
    the latest run for an extension, and starting a run drops the scores
    and result values an earlier run left behind.
    """

    def __init__(self) -> None:
        super().__init__()
        self._comments: List[Tuple[str, Optional[int], Comment]] = []
        self._issues: List[Tuple[Optional[int], StoredIssue]] = []
        self._scores: Dict[Tuple[str, str], float] = {}
        self._results: Dict[Tuple[str, str, str], Any] = {}
        self._latest_runs: Dict[str, int] = {}
        self._next_run_id = 1
        self._run_id: Optional[int] = None
        self._snapshot: Optional[tuple] = None

    def add_comment(
        self, target: ExtensionTarget, check_name: str, text: str, level: str = "info"
    ) -> None:
        self._comments.append((target.path, self._run_id, Comment(check_name, text, level)))

    def set_score(self, target: ExtensionTarget, check_name: str, score: float) -> None:
        self._scores[(target.path, check_name)] = score

    def set_result_value(
        self, target: ExtensionTarget, check_name: str, key: str, value: Any
    ) -> None:
        self._results[(target.path, check_name, key)] = copy.deepcopy(value)

    def _write_issue(self, issue: StoredIssue) -> None:
        self._issues.append((self._run_id, issue))

    def _begin(self) -> None:
        self._snapshot = (
            list(self._comments),
            list(self._issues),
            dict(self._scores),
            dict(self._results),
            dict(self._latest_runs),
        )
        extension = self._extension
        self._scores = {k: v for k, v in self._scores.items() if k[0] != extension}
        self._results = {k: v for k, v in self._results.items() if k[0] != extension}

        self._run_id = self._next_run_id
        self._next_run_id += 1
        self._latest_runs[extension] = self._run_id

    def _commit(self) -> None:
        self._snapshot = None
        self._run_id = None

    def _rollback(self) -> None:
        if self._snapshot is not None:
            (
                self._comments,
                self._issues,
                self._scores,
                self._results,
                self._latest_runs,
            ) = self._snapshot
            self._snapshot = None
        self._run_id = None

    def comments(self, target: ExtensionTarget) -> List[Comment]:
        run_id = self._latest_runs.get(target.path)
        return [c for ext, rid, c in self._comments if ext == target.path and rid == run_id]

    def issues(self, target: ExtensionTarget) -> List[StoredIssue]:
        run_id = self._latest_runs.get(target.path)
        return [i for rid, i in self._issues if i.extension == target.path and rid == run_id]

    def score(self, target: ExtensionTarget, check_name: str) -> Optional[float]:
        return self._scores.get((target.path, check_name))

    def result_values(self, target: ExtensionTarget) -> Dict[str, Dict[str, Any]]:
        values: Dict[str, Dict[str, Any]] = {}
        for (ext, check_name, key), value in self._results.items():
            if ext == target.path:
                values.setdefault(check_name, {})[key] = value
        return values
