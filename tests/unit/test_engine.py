"""
Unit tests for the removal engine (removal/engine.py) and edit plans.

Tests cover:
- Whitespace policies (line, following, none)
- Line terminators (LF, CRLF, end of input)
- Several annotations on one line
- Collapsing nested matches
- Import removal and names resolved through removed imports
- Edit plan ordering and merging
"""

import pytest
from structlog.testing import capture_logs

from annotation_stripper.lexing.scanner import tokenize
from annotation_stripper.models.edit_plan import Deletion, EditPlan, WhitespacePolicy
from annotation_stripper.models.targets import RemovalTargets
from annotation_stripper.recognition import recognize_annotations, recognize_imports
from annotation_stripper.removal.engine import annotation_extent, build_edit_plan
from annotation_stripper.removal.matcher import NameMatcher
from annotation_stripper.removal.serializer import render_translated


def strip(text, names=(), patterns=None, policy=WhitespacePolicy.LINE, remove_imports=False):
    """Plan and apply removals on plain text without escapes."""
    tokens = tokenize(text)
    declarations = recognize_imports(tokens)
    targets = RemovalTargets.of(names, patterns)
    outcome = build_edit_plan(
        text,
        recognize_annotations(tokens),
        declarations,
        NameMatcher(targets, declarations),
        policy=policy,
        remove_imports=remove_imports,
    )
    return render_translated(text, outcome.plan), outcome


# ============================================================================
# Whitespace policies
# ============================================================================


class TestAnnotationExtent:
    """Tests for annotation_extent() function."""

    @pytest.mark.unit
    def test_line_policy_own_line(self):
        """Test that an annotation alone on its line takes the line."""
        text = "class C {\n    @A\n    int x;\n}"
        start = text.index("@")

        assert annotation_extent(text, start, start + 2, WhitespacePolicy.LINE) == (10, 17)

    @pytest.mark.unit
    def test_line_policy_inline(self):
        """Test that an inline annotation takes the blanks after it."""
        assert annotation_extent("new @A Object", 4, 6, WhitespacePolicy.LINE) == (4, 7)

    @pytest.mark.unit
    def test_line_policy_inline_keeps_separator(self):
        """Test that the blank between two words survives an annotation without leading blank."""
        assert annotation_extent("new@A Foo()", 3, 5, WhitespacePolicy.LINE) == (3, 5)

    @pytest.mark.unit
    def test_line_policy_inline_before_punctuation(self):
        """Test that blanks are taken when no words would join."""
        assert annotation_extent("(@A )", 1, 3, WhitespacePolicy.LINE) == (1, 4)

    @pytest.mark.unit
    def test_following_policy_keeps_separator(self):
        """Test that the following-whitespace policy also keeps words apart."""
        assert annotation_extent("new@A\n  Foo()", 3, 5, WhitespacePolicy.FOLLOWING) == (3, 5)

    @pytest.mark.unit
    def test_line_policy_trailing_annotation(self):
        """Test that a trailing annotation takes the blanks before it, not the newline."""
        text = "int x; @A\nint y;"

        assert annotation_extent(text, 7, 9, WhitespacePolicy.LINE) == (6, 9)

    @pytest.mark.unit
    def test_line_policy_crlf(self):
        """Test that CRLF is removed as one terminator."""
        assert annotation_extent("@A\r\nint x;", 0, 2, WhitespacePolicy.LINE) == (0, 4)

    @pytest.mark.unit
    def test_line_policy_end_of_input(self):
        """Test an annotation that ends the text."""
        assert annotation_extent("@A  ", 0, 2, WhitespacePolicy.LINE) == (0, 4)

    @pytest.mark.unit
    def test_following_policy(self):
        """Test that all following whitespace goes, newlines included."""
        assert annotation_extent("@A\n\n  int x;", 0, 2, WhitespacePolicy.FOLLOWING) == (0, 6)

    @pytest.mark.unit
    def test_following_policy_keeps_whitespace_before_end(self):
        """Test that whitespace running to the end of the text stays."""
        assert annotation_extent("int x; @A  \n", 7, 9, WhitespacePolicy.FOLLOWING) == (7, 9)

    @pytest.mark.unit
    def test_none_policy(self):
        """Test that only the annotation itself goes."""
        assert annotation_extent("@A\nint x;", 0, 2, WhitespacePolicy.NONE) == (0, 2)


class TestBuildEditPlan:
    """Tests for build_edit_plan() function."""

    @pytest.mark.unit
    def test_nothing_matched(self):
        """Test that no match gives an empty plan."""
        output, outcome = strip("@A int x;", ["B"])

        assert output == "@A int x;"
        assert outcome.plan.is_empty
        assert outcome.removed_annotations == []

    @pytest.mark.unit
    def test_annotations_sharing_a_line(self):
        """Test that two removed annotations on one line take the whole line."""
        output, _ = strip("class C {\n  @A @B\n  int x;\n}\n", ["A", "B"])

        assert output == "class C {\n  int x;\n}\n"

    @pytest.mark.unit
    def test_one_of_two_annotations_removed(self):
        """Test that a kept annotation keeps its line."""
        output, _ = strip("@A @B\nint x;\n", ["A"])

        assert output == "@B\nint x;\n"

    @pytest.mark.unit
    def test_parameter_annotation(self):
        """Test removal inside a parameter list."""
        output, _ = strip("void f(@A int x, @A(1) int y) {}", ["A"])

        assert output == "void f(int x, int y) {}"

    @pytest.mark.unit
    def test_crlf_lines(self):
        """Test that CRLF line structure survives removal."""
        output, _ = strip("class C {\r\n    @A\r\n    int x;\r\n}\r\n", ["A"])

        assert output == "class C {\r\n    int x;\r\n}\r\n"

    @pytest.mark.unit
    def test_following_policy_end_to_end(self):
        """Test the following-whitespace policy on a file."""
        output, _ = strip("@A\n\nclass C {}\n", ["A"], policy=WhitespacePolicy.FOLLOWING)

        assert output == "class C {}\n"

    @pytest.mark.unit
    def test_outer_match_collapses_inner(self):
        """Test that a matched annotation inside a matched one is not planned separately."""
        output, outcome = strip("@Outer(@Inner) int x;", ["Outer", "Inner"])

        assert output == "int x;"
        assert [u.name for u in outcome.removed_annotations] == ["Outer"]
        assert len(outcome.plan) == 1

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text",
        [
            "@Outer(@Inner) int x;",
            "@Outer(value = @Inner) int x;",
            "@Outer({@Inner, @Keep}) int x;",
            "@A(@B(@Inner)) int x;",
        ],
    )
    def test_inner_match_only_keeps_enclosing_arguments(self, text):
        """Test that a nested annotation stays when its enclosing annotation is kept."""
        output, outcome = strip(text, ["Inner"])

        assert output == text
        assert outcome.removed_annotations == []
        assert outcome.matched_names == set()

    @pytest.mark.unit
    def test_inner_match_beside_top_level_match(self):
        """Test that a top-level usage is removed while a nested one of the same name stays."""
        output, outcome = strip("@Inner @Outer(@Inner) int x;", ["Inner"])

        assert output == "@Outer(@Inner) int x;"
        assert [u.start for u in outcome.removed_annotations] == [0]

    @pytest.mark.unit
    def test_plan_built_is_logged(self):
        """Test that the plan summary is logged at debug level."""
        with capture_logs() as logs:
            strip("@A @B int x;", ["A", "B"])

        entry = next(e for e in logs if e["event"] == "edit_plan_built")
        assert entry["log_level"] == "debug"
        assert entry["annotations"] == 2
        assert entry["deletions"] == 1

    @pytest.mark.unit
    def test_matched_names_reported(self):
        """Test that the outcome records which names matched."""
        _, outcome = strip("@A @p.B int x;", ["A", "p.B", "C"])

        assert outcome.matched_names == {"A", "p.B"}


class TestImportRemoval:
    """Tests for import declarations in the edit plan."""

    @pytest.mark.unit
    def test_imports_kept_by_default(self):
        """Test that imports are only removed on request."""
        text = "import org.x.Nullable;\n\n@Nullable\nString s;\n"
        output, _ = strip(text, ["Nullable"])

        assert output == "import org.x.Nullable;\n\nString s;\n"

    @pytest.mark.unit
    def test_import_removed_with_its_line(self):
        """Test that a removed import takes its line terminator."""
        text = "import org.x.Nullable;\nimport java.util.List;\n\n@Nullable\nString s;\n"
        output, outcome = strip(text, ["Nullable"], remove_imports=True)

        assert output == "import java.util.List;\n\nString s;\n"
        assert [d.name for d in outcome.removed_imports] == ["org.x.Nullable"]

    @pytest.mark.unit
    def test_import_followed_by_comment(self):
        """Test that an import followed by code on its line is removed exactly."""
        output, _ = strip("import a.B;   // c\nclass C {}", ["B"], remove_imports=True)

        assert output == "   // c\nclass C {}"

    @pytest.mark.unit
    def test_usage_resolved_through_removed_import(self):
        """Test that usages of a removed import are removed with it."""
        text = "import com.example.Marker;\n@Marker\nclass C {}\n"

        kept, _ = strip(text, patterns=["^com[.]example[.]"])
        removed, _ = strip(text, patterns=["^com[.]example[.]"], remove_imports=True)

        assert kept == text
        assert removed == "class C {}\n"


class TestEditPlan:
    """Tests for EditPlan model."""

    @pytest.mark.unit
    def test_from_deletions_sorts_and_merges(self):
        """Test that overlapping deletions merge and order is restored."""
        plan = EditPlan.from_deletions(
            [
                Deletion(10, 12, "annotation", "B"),
                Deletion(0, 4, "annotation", "A"),
                Deletion(2, 6, "import", "x.A"),
                Deletion(8, 8, "annotation", "Empty"),
            ]
        )

        assert [(d.start, d.end) for d in plan] == [(0, 6), (10, 12)]
        assert plan.deleted_length() == 8

    @pytest.mark.unit
    def test_overlapping_plan_rejected(self):
        """Test that a plan cannot be built from overlapping deletions directly."""
        with pytest.raises(ValueError):
            EditPlan([Deletion(0, 4, "annotation", "A"), Deletion(3, 5, "annotation", "B")])

    @pytest.mark.unit
    def test_invalid_deletion(self):
        """Test deletion validation."""
        with pytest.raises(ValueError):
            Deletion(5, 2, "annotation", "A")
        with pytest.raises(ValueError):
            Deletion(0, 2, "comment", "A")
