"""IssueSink: where comments, issues, scores and raw results end up.

Issues are written in three steps, mirroring how a reviewer's issue log is
filled in: attach details and affected files, name the issue with
``add_issue``, then ``save`` it. Issues are always written for the
extension of the currently open ``transaction``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional

from ..exceptions import StorageError
from ..models import Comment, ExtensionTarget


@dataclass
class StoredIssue:
    """An issue as persisted: core fields plus free-form details and files."""

    extension: str
    check_name: str
    category: str
    value: Any
    details: Dict[str, Any] = field(default_factory=dict)
    files: List[str] = field(default_factory=list)


@dataclass
class _PendingIssue:
    check_name: Optional[str] = None
    category: Optional[str] = None
    value: Any = None
    details: Dict[str, Any] = field(default_factory=dict)
    files: List[str] = field(default_factory=list)


class IssueSink(ABC):
    """Append-only log of review output, partitioned by extension."""

    def __init__(self) -> None:
        self._extension: Optional[str] = None
        self._pending = _PendingIssue()

    # ── transaction ───────────────────────────────────────────────

    @contextmanager
    def transaction(self, target: ExtensionTarget) -> Iterator["IssueSink"]:
        """Group all writes for one run over ``target``.

        Everything written inside the block is committed together, or
        discarded if the block raises.
        """
        if self._extension is not None:
            raise StorageError(
                "A transaction is already open",
                details={"extension": self._extension},
            )
        self._extension = target.path
        self._begin()
        try:
            yield self
        except BaseException:
            self._rollback()
            raise
        else:
            self._commit()
        finally:
            self._extension = None
            self._pending = _PendingIssue()

    # ── issue staging ─────────────────────────────────────────────

    def add_issue(self, check_name: str, category: str, value: Any) -> None:
        self._pending.check_name = check_name
        self._pending.category = category
        self._pending.value = value

    def add_detail(self, key: str, value: Any) -> None:
        self._pending.details[key] = value

    def add_files_for_issue(self, files: Iterable[str]) -> None:
        self._pending.files.extend(files)

    def save(self) -> None:
        """Persist the staged issue and start a fresh one."""
        pending = self._pending
        if self._extension is None:
            raise StorageError("Issues can only be saved inside a transaction")
        if pending.check_name is None or pending.category is None:
            raise StorageError(
                "save() called before add_issue()",
                details={"extension": self._extension},
            )
        self._write_issue(
            StoredIssue(
                extension=self._extension,
                check_name=pending.check_name,
                category=pending.category,
                value=pending.value,
                details=dict(pending.details),
                files=list(pending.files),
            )
        )
        self._pending = _PendingIssue()

    # ── writes ────────────────────────────────────────────────────

    @abstractmethod
    def add_comment(
        self, target: ExtensionTarget, check_name: str, text: str, level: str = "info"
    ) -> None: ...

    @abstractmethod
    def set_score(self, target: ExtensionTarget, check_name: str, score: float) -> None: ...

    @abstractmethod
    def set_result_value(
        self, target: ExtensionTarget, check_name: str, key: str, value: Any
    ) -> None: ...

    @abstractmethod
    def _write_issue(self, issue: StoredIssue) -> None: ...

    @abstractmethod
    def _begin(self) -> None: ...

    @abstractmethod
    def _commit(self) -> None: ...

    @abstractmethod
    def _rollback(self) -> None: ...

    # ── reads ─────────────────────────────────────────────────────

    @abstractmethod
    def comments(self, target: ExtensionTarget) -> List[Comment]: ...

    @abstractmethod
    def issues(self, target: ExtensionTarget) -> List[StoredIssue]: ...

    @abstractmethod
    def score(self, target: ExtensionTarget, check_name: str) -> Optional[float]: ...

    @abstractmethod
    def result_values(self, target: ExtensionTarget) -> Dict[str, Dict[str, Any]]:
        """Return ``{check_name: {key: value}}`` for ``target``."""
