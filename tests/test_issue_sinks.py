"""Tests for storage/ - issue staging, transactions, SQLite persistence."""

import pytest

from complexity_judge.exceptions import StorageError
from complexity_judge.models import ExtensionTarget
from complexity_judge.storage import MemoryIssueSink, SqliteIssueSink

EXT = ExtensionTarget("/ext/Vendor_Module")
OTHER = ExtensionTarget("/ext/Other_Module")


@pytest.fixture(params=["memory", "sqlite"])
def any_sink(request, tmp_path):
    """Both sink implementations behind the same interface."""
    if request.param == "memory":
        yield MemoryIssueSink()
    else:
        with SqliteIssueSink(str(tmp_path / ".judge" / "issues.db")) as sink:
            yield sink


class TestIssueStaging:
    def test_details_and_files_attach_to_saved_issue(self, any_sink):
        with any_sink.transaction(EXT):
            any_sink.add_detail("lineNumber", 42)
            any_sink.add_files_for_issue(["src/Foo.php"])
            any_sink.add_issue("mess_detector", "mess_detector", "src/Foo.php:42")
            any_sink.save()

        [issue] = any_sink.issues(EXT)
        assert issue.category == "mess_detector"
        assert issue.value == "src/Foo.php:42"
        assert issue.details == {"lineNumber": 42}
        assert issue.files == ["src/Foo.php"]

    def test_save_resets_staged_issue(self, any_sink):
        with any_sink.transaction(EXT):
            any_sink.add_detail("lineNumber", 1)
            any_sink.add_issue("metrics", "ccn", 30)
            any_sink.save()
            any_sink.add_issue("duplication", "duplicated_code", 12.5)
            any_sink.save()

        first, second = any_sink.issues(EXT)
        assert first.details == {"lineNumber": 1}
        assert second.details == {}
        assert second.value == 12.5

    def test_save_without_issue(self, any_sink):
        with pytest.raises(StorageError):
            with any_sink.transaction(EXT):
                any_sink.save()

    def test_save_outside_transaction(self, any_sink):
        any_sink.add_issue("metrics", "ccn", 30)
        with pytest.raises(StorageError):
            any_sink.save()

    def test_nested_transaction_rejected(self, any_sink):
        with any_sink.transaction(EXT):
            with pytest.raises(StorageError):
                with any_sink.transaction(OTHER):
                    pass


class TestTransactions:
    def test_rollback_discards_everything(self, any_sink):
        with pytest.raises(RuntimeError):
            with any_sink.transaction(EXT):
                any_sink.add_comment(EXT, "metrics", "Critical metric ccn value: 30", "warning")
                any_sink.add_issue("metrics", "ccn", 30)
                any_sink.save()
                any_sink.set_score(EXT, "SourceCodeComplexity", -5)
                raise RuntimeError("tool crashed")

        assert any_sink.issues(EXT) == []
        assert any_sink.comments(EXT) == []
        assert any_sink.score(EXT, "SourceCodeComplexity") is None

    def test_extensions_are_partitioned(self, any_sink):
        with any_sink.transaction(EXT):
            any_sink.add_issue("metrics", "ccn", 30)
            any_sink.save()
            any_sink.set_score(EXT, "SourceCodeComplexity", -1)
        with any_sink.transaction(OTHER):
            any_sink.set_score(OTHER, "SourceCodeComplexity", 3)

        assert len(any_sink.issues(EXT)) == 1
        assert any_sink.issues(OTHER) == []
        assert any_sink.score(OTHER, "SourceCodeComplexity") == 3


class TestRepeatedRuns:
    """Reads reflect the latest run for an extension, on both sinks."""

    def test_issues_and_comments_from_latest_run(self, any_sink):
        for value in (40, 12):
            with any_sink.transaction(EXT):
                any_sink.add_comment(
                    EXT, "duplication", f"Extension contains {value}% of duplicated code.", "warning"
                )
                any_sink.add_issue("duplication", "duplicated_code", value)
                any_sink.save()

        assert [i.value for i in any_sink.issues(EXT)] == [12]
        assert [c.text for c in any_sink.comments(EXT)] == ["Extension contains 12% of duplicated code."]

    def test_new_run_clears_scores_and_result_values(self, any_sink):
        with any_sink.transaction(EXT):
            any_sink.set_score(EXT, "duplication", 0)
            any_sink.set_result_value(EXT, "duplication", "duplication_percentage", 40)
            any_sink.set_score(OTHER, "duplication", 1)
        with any_sink.transaction(EXT):
            any_sink.set_score(EXT, "metrics", 1)

        assert any_sink.score(EXT, "duplication") is None
        assert any_sink.result_values(EXT) == {}
        assert any_sink.score(EXT, "metrics") == 1
        assert any_sink.score(OTHER, "duplication") == 1

    def test_failed_run_keeps_previous_results(self, any_sink):
        with any_sink.transaction(EXT):
            any_sink.add_issue("metrics", "ccn", 30)
            any_sink.save()
            any_sink.set_score(EXT, "metrics", -1)
        with pytest.raises(RuntimeError):
            with any_sink.transaction(EXT):
                any_sink.set_score(EXT, "metrics", 1)
                raise RuntimeError("tool crashed")

        assert [i.value for i in any_sink.issues(EXT)] == [30]
        assert any_sink.score(EXT, "metrics") == -1


class TestScoresAndResults:
    def test_score_overwritten(self, any_sink):
        any_sink.set_score(EXT, "metrics", 5)
        any_sink.set_score(EXT, "metrics", -5)
        assert any_sink.score(EXT, "metrics") == -5

    def test_result_values_grouped_by_check(self, any_sink):
        any_sink.set_result_value(EXT, "metrics", "metrics", {"ccn": 3, "pdepend": "2.16.2"})
        any_sink.set_result_value(EXT, "duplication", "duplication_percentage", 1.5)
        assert any_sink.result_values(EXT) == {
            "metrics": {"metrics": {"ccn": 3, "pdepend": "2.16.2"}},
            "duplication": {"duplication_percentage": 1.5},
        }

    def test_comment_levels_round_trip(self, any_sink):
        with any_sink.transaction(EXT):
            any_sink.add_comment(EXT, "mess_detector", "Mess detector found 0 results only")
            any_sink.add_comment(EXT, "duplication", "Extension contains 12% of duplicated code.", "warning")
        assert [(c.check_name, c.level) for c in any_sink.comments(EXT)] == [
            ("mess_detector", "info"),
            ("duplication", "warning"),
        ]


class TestSqliteIssueSink:
    def test_creates_tables(self, tmp_path):
        with SqliteIssueSink(str(tmp_path / "issues.db")) as sink:
            tables = {
                r["name"]
                for r in sink.conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        assert {"runs", "scores", "comments", "issues", "issue_details", "issue_files", "result_values"} <= tables

    def test_gitignore_written_for_judge_dir(self, tmp_path):
        with SqliteIssueSink(str(tmp_path / ".judge" / "issues.db")):
            pass
        assert (tmp_path / ".judge" / ".gitignore").read_text() == "*\n"

    def test_reads_latest_run_only(self, tmp_path):
        db_path = str(tmp_path / "issues.db")
        with SqliteIssueSink(db_path) as sink:
            with sink.transaction(EXT):
                sink.add_issue("metrics", "ccn", 30)
                sink.save()
            with sink.transaction(EXT):
                sink.add_issue("metrics", "ccn", 12)
                sink.save()

        with SqliteIssueSink(db_path) as sink:
            assert [i.value for i in sink.issues(EXT)] == [12]

    def test_not_connected(self, tmp_path):
        sink = SqliteIssueSink(str(tmp_path / "issues.db"))
        with pytest.raises(RuntimeError):
            sink.score(EXT, "metrics")
