"""Tests for the call detector, expression builder and analyze()."""

import logging

import pytest

from bigolens.analysis import analyze, build_expression, count_significant_calls, sanitize
from bigolens.analysis.estimator import DISCLAIMER, AnalysisResult
from bigolens.config import Settings


# ============================================================================
# Call detector
# ============================================================================

class TestSortCalls:

    def test_qualified_and_member_calls(self):
        assert count_significant_calls("std::sort(v.begin(), v.end()); v.sort();") == 2

    def test_stable_sort_counts(self):
        assert count_significant_calls("stable_sort(a, a + n);") == 1

    def test_whitespace_before_paren(self):
        assert count_significant_calls("sort (a, a + n);") == 1

    @pytest.mark.parametrize("code", [
        "mySort(v);",
        "sorted(v);",
        "sort_by(v);",
        "int sort = 3;",
    ])
    def test_other_identifiers_do_not_count(self, code):
        assert count_significant_calls(code) == 0

    def test_sanitized_comments_and_strings_do_not_count(self):
        code = '// sort(v)\nputs("sort(x)");'
        assert count_significant_calls(sanitize(code)) == 0

    def test_custom_names(self):
        code = "qsort(a, n, sizeof(int), cmp); sort(v);"
        assert count_significant_calls(code, ("qsort",)) == 1

    def test_no_names_counts_nothing(self):
        assert count_significant_calls("sort(v);", ()) == 0

    def test_names_are_literal(self):
        assert count_significant_calls("a.b(x); axb(x);", ("a.b",)) == 1


# ============================================================================
# Expression builder
# ============================================================================

class TestBuildExpression:

    @pytest.mark.parametrize("linear,log,expected", [
        (0, 0, "O(1)"),
        (1, 0, "O(N)"),
        (2, 0, "O(N^2)"),
        (0, 1, "O(log N)"),
        (0, 2, "O(log^2 N)"),
        (1, 1, "O(N × log N)"),
        (3, 2, "O(N^3 × log^2 N)"),
    ])
    def test_expressions(self, linear, log, expected):
        assert build_expression(linear, log) == expected


# ============================================================================
# analyze()
# ============================================================================

class TestAnalyze:

    def test_empty_source(self):
        result = analyze("")
        assert result.expression == "O(1)"
        assert result.loop_count == 0
        assert result.sort_call_count == 0
        assert result.note == DISCLAIMER

    def test_quadratic(self):
        code = """
        int main() {
            for (int i = 0; i < n; i++) {
                for (int j = 0; j < n; j++) {
                    total += a[i] * b[j];
                }
            }
        }
        """
        result = analyze(code)
        assert result.expression == "O(N^2)"
        assert result.loop_count == 2
        assert result.max_linear_depth == 2

    def test_logarithmic(self):
        assert analyze("while(n>1){ n/=2; }").expression == "O(log N)"

    def test_linear_times_log(self):
        result = analyze("for(int i=0;i<n;i++){ for(int j=1;j<n;j*=2){} }")
        assert result.expression == "O(N × log N)"
        assert (result.max_linear_depth, result.max_log_depth) == (1, 1)

    def test_sort_without_loops(self):
        result = analyze("sort(v.begin(), v.end());")
        assert result.expression == "O(N × log N)"
        assert result.loop_count == 0
        assert result.sort_call_count == 1
        assert "No loops detected" in result.note
        assert result.note.endswith(DISCLAIMER)

    def test_sort_with_loops_keeps_loop_estimate(self):
        result = analyze("sort(a, a + n); for (int i = 0; i < n; i++) {}")
        assert result.expression == "O(N)"
        assert result.sort_call_count == 1
        assert "Found 1 sort call(s)" in result.note
        assert "No loops detected" not in result.note

    def test_commented_loop_is_ignored(self):
        code = "// for (int i = 0; i < n; i++) {}\n/* while (n) */ int x = 0;"
        assert analyze(code).expression == "O(1)"

    def test_loop_inside_string_is_ignored(self):
        result = analyze('printf("for(;;){");')
        assert result.loop_count == 0
        assert result.expression == "O(1)"

    def test_character_brace_does_not_break_nesting(self):
        code = "for(int i=0;i<n;i++){ char c = '}'; for(int j=0;j<n;j++){} }"
        assert analyze(code).expression == "O(N^2)"

    def test_custom_sort_names(self):
        result = analyze("qsort(a, n, sizeof(int), cmp);", Settings(sort_calls=("qsort",)))
        assert result.sort_call_count == 1
        assert result.expression == "O(N × log N)"

    def test_disabled_sort_detection(self):
        result = analyze("sort(v.begin(), v.end());", Settings(sort_calls=()))
        assert result.expression == "O(1)"

    def test_deterministic(self):
        code = "for(int i=0;i<n;i++){ while(j>0){ j/=2; } }"
        assert analyze(code) == analyze(code)

    def test_malformed_input_never_raises(self):
        for code in ["for(", "}}}{{{", "while (x", "do", "#define X \\", "'", '"']:
            assert isinstance(analyze(code), AnalysisResult)

    def test_logs_estimate(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="bigolens"):
            analyze("for(int i=0;i<n;i++){}")
        assert "Estimated O(N)" in caplog.text

    @pytest.mark.slow
    def test_large_generated_input(self):
        code = "int main() {\n" + "for(int i=0;i<n;i++){ x += i; }\n" * 20000 + "}\n"
        result = analyze(code)
        assert result.loop_count == 20000
        assert result.expression == "O(N)"


class TestAnalysisResultOutput:

    def test_to_json_keys(self):
        data = analyze("sort(v.begin(), v.end());").to_json()
        assert data == {
            "expression": "O(N × log N)",
            "loopCount": 0,
            "maxLinearDepth": 0,
            "maxLogDepth": 0,
            "sortCallCount": 1,
            "note": data["note"],
        }

    def test_str(self):
        text = str(analyze("for(int i=0;i<n;i++){}"))
        assert text.startswith("O(N) | Loops: 1")
