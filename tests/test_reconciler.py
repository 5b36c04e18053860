"""Tests for per-file diff reconciliation."""

import pytest

from rsloc.diff.reconciler import ReconciliationError, reconcile
from rsloc.git.models import Hunk
from rsloc.stats.models import Context, Locs, LocsDiff, LocStatsDiff

OLD = "fn a() {}\nfn b() {}\nfn c() {}\n"
NEW = "fn a() {}\nfn x() {}\nfn y() {}\nfn z() {}\nfn c() {}\n"
HUNK = Hunk(old_start=2, old_len=1, new_start=2, new_len=3)


class TestReconcile:
    def test_replaced_line(self):
        diff = reconcile(OLD, NEW, [HUNK])
        assert diff.production.added == Locs(code=3)
        assert diff.production.removed == Locs(code=1)
        assert diff.production.net_code() == 2
        assert diff.total.net_code() == 2
        assert diff.test == LocsDiff()

    def test_identical_content(self):
        assert reconcile(OLD, OLD, []) == LocStatsDiff()

    def test_inverse_hunks_swap_sides(self):
        forward = reconcile(OLD, NEW, [HUNK])
        backward = reconcile(NEW, OLD, [HUNK.inverse()])
        for context in Context:
            assert backward.get(context).added == forward.get(context).removed
            assert backward.get(context).removed == forward.get(context).added
            assert backward.get(context).net_all() == -forward.get(context).net_all()

    def test_multiple_hunks(self):
        old = "a();\nb();\nc();\nd();\n"
        new = "a();\n// b\nc();\nd();\ne();\n"
        hunks = [Hunk(2, 1, 2, 1), Hunk(4, 0, 5, 1)]
        diff = reconcile(old, new, hunks)
        assert diff.production.added == Locs(code=1, comments=1)
        assert diff.production.removed == Locs(code=1)

    def test_classification_uses_whole_file(self):
        old = "/*\nold\n*/\n"
        new = "/*\nold\nnew line\n*/\n"
        diff = reconcile(old, new, [Hunk(2, 0, 3, 1)])
        assert diff.production.added == Locs(comments=1)

    def test_raw_string_spanning_hunk(self):
        old = 'const Q: &str = r#"\nfirst "quoted"\n"#;\nfn after() {}\n'
        new = 'const Q: &str = r#"\nfirst "quoted"\nsay "hi" /* still text\n"#;\nfn later() {}\n'
        diff = reconcile(old, new, [Hunk(2, 0, 3, 1), Hunk(4, 1, 5, 1)])
        assert diff.production.added == Locs(code=2)
        assert diff.production.removed == Locs(code=1)

    def test_lines_inside_test_module(self, mixed_source):
        lines = mixed_source.splitlines(keepends=True)
        lines.insert(11, "        let y = 2;\n")
        new = "".join(lines)
        diff = reconcile(mixed_source, new, [Hunk(11, 0, 12, 1)])
        assert diff.test.added == Locs(code=1)
        assert diff.production == LocsDiff()

    def test_added_file(self):
        diff = reconcile(None, "fn a() {}\n// c\n", [])
        assert diff.production.added == Locs(code=1, comments=1)
        assert diff.production.removed == Locs()

    def test_deleted_file(self):
        diff = reconcile("fn a() {}\n\n", None, [Hunk(1, 2, 0, 0)])
        assert diff.production.removed == Locs(code=1, blanks=1)
        assert diff.production.added == Locs()

    def test_missing_on_both_sides(self):
        assert reconcile(None, None, []) == LocStatsDiff()

    def test_insertion_at_start(self):
        diff = reconcile("", "fn a() {}\n", [Hunk(0, 0, 1, 1)])
        assert diff.production.added == Locs(code=1)

    def test_base_context(self):
        diff = reconcile(None, "fn helper() {}\n", [], Context.TEST)
        assert diff.test.added == Locs(code=1)
        assert diff.production == LocsDiff()

    def test_old_side_keeps_its_own_base_context(self):
        old = "fn a() {}\nfn b() {}\n"
        new = "fn a() {}\nfn c() {}\n"
        diff = reconcile(old, new, [Hunk(2, 1, 2, 1)], Context.TEST, Context.PRODUCTION)
        assert diff.production.removed == Locs(code=1)
        assert diff.production.added == Locs()
        assert diff.test.added == Locs(code=1)
        assert diff.test.removed == Locs()


class TestRangeErrors:
    def test_old_range_past_end(self):
        with pytest.raises(ReconciliationError):
            reconcile("a();\n", "a();\nb();\n", [Hunk(5, 1, 2, 1)])

    def test_new_range_past_end(self):
        with pytest.raises(ReconciliationError):
            reconcile("a();\n", "a();\nb();\n", [Hunk(1, 0, 2, 3)])

    def test_zero_length_start_past_end(self):
        with pytest.raises(ReconciliationError):
            reconcile("a();\n", "a();\nb();\n", [Hunk(1, 1, 3, 0)])

    def test_non_empty_range_starting_at_zero(self):
        with pytest.raises(ReconciliationError):
            reconcile("a();\n", "b();\n", [Hunk(0, 1, 1, 1)])
