"""Tests for the structural scanner."""

import time

import pytest

from bigolens.analysis.scanner import LoopMetrics, scan_loops


def metrics(loops: int, linear: int, log: int) -> LoopMetrics:
    return LoopMetrics(loop_count=loops, max_linear_depth=linear, max_log_depth=log)


class TestLoopNesting:
    """Depth bookkeeping for for / while / do loops."""

    def test_empty_input(self):
        assert scan_loops("") == metrics(0, 0, 0)

    def test_flat_linear_loop(self):
        assert scan_loops("for (int i=0;i<n;i++) { sum += i; }") == metrics(1, 1, 0)

    def test_nested_linear_loops(self):
        code = "for(int i=0;i<n;i++){ for(int j=0;j<n;j++){ } }"
        assert scan_loops(code) == metrics(2, 2, 0)

    def test_sequential_loops_do_not_nest(self):
        code = "for(int i=0;i<n;i++){} for(int j=0;j<n;j++){}"
        assert scan_loops(code) == metrics(2, 1, 0)

    @pytest.mark.parametrize("code", [
        "for(int i=1;i<n;i*=2){}",
        "while(n>1){ n/=2; }",
        "for(int i=n;i>0;i>>=1) total += i;",
    ])
    def test_logarithmic_loop(self, code):
        assert scan_loops(code) == metrics(1, 0, 1)

    def test_linear_around_logarithmic(self):
        code = "for(int i=0;i<n;i++){ for(int j=1;j<n;j*=2){} }"
        assert scan_loops(code) == metrics(2, 1, 1)

    def test_two_log_loops_around_linear(self):
        code = (
            "for(int i=1;i<n;i*=2){"
            "  for(int j=n;j>0;j/=2){"
            "    for(int k=0;k<n;k++){}"
            "  }"
            "}"
        )
        assert scan_loops(code) == metrics(3, 1, 2)

    def test_body_without_braces(self):
        code = "for(int i=0;i<n;i++) for(int j=0;j<n;j++) c[i][j] = 0;"
        assert scan_loops(code) == metrics(2, 2, 0)

    def test_constant_loops_count_but_add_no_depth(self):
        assert scan_loops("for(;;){ if (done) break; }") == metrics(1, 0, 0)
        assert scan_loops("while (1) { for(int j=0;j<n;j++){} }") == metrics(2, 1, 0)

    def test_range_based_for_is_linear(self):
        assert scan_loops("for (auto x : v) { total += x; }") == metrics(1, 1, 0)

    def test_do_while(self):
        code = "do { for(int i=0;i<n;i++){} } while (x);"
        assert scan_loops(code) == metrics(2, 2, 0)

    def test_do_while_without_braces(self):
        code = "do x++; while (x < n); for(int i=0;i<n;i++){}"
        assert scan_loops(code) == metrics(2, 1, 0)

    def test_binary_search(self):
        code = (
            "while (lo < hi) {"
            "  int mid = (lo + hi) / 2;"
            "  if (a[mid] < x) lo = mid + 1; else hi = mid;"
            "}"
        )
        assert scan_loops(code) == metrics(1, 0, 1)

    def test_input_loop_is_linear(self):
        assert scan_loops("while (cin >> x) { total += x; }") == metrics(1, 1, 0)


class TestBranches:
    """if / else / switch never add depth."""

    def test_if_inside_loop(self):
        code = "for(int i=0;i<n;i++){ if (i>0) { } }"
        assert scan_loops(code) == metrics(1, 1, 0)

    def test_deepest_branch_wins(self):
        code = (
            "if (a) { for(int i=0;i<n;i++){} }"
            "else { for(int i=0;i<n;i++){ for(int j=0;j<n;j++){} } }"
        )
        assert scan_loops(code) == metrics(3, 2, 0)

    def test_else_if_chain(self):
        code = "if (a) {} else if (b) { while (i < n) i++; } else { }"
        assert scan_loops(code) == metrics(1, 1, 0)

    def test_switch_with_labels(self):
        code = (
            "switch (t) {"
            "  case 1: for(int i=0;i<n;i++) x++; break;"
            "  default: while (k < n) k++;"
            "}"
        )
        assert scan_loops(code) == metrics(2, 1, 0)

    def test_loop_inside_if_inside_loop(self):
        code = "for(int i=0;i<n;i++){ if (i % 2) for(int j=0;j<n;j++) s++; else s--; }"
        assert scan_loops(code) == metrics(2, 2, 0)


class TestDeclarations:
    """Function, class and lambda bodies are scanned like blocks."""

    def test_function_body(self):
        code = "int main() { for(int i=0;i<n;i++){ } return 0; }"
        assert scan_loops(code) == metrics(1, 1, 0)

    def test_method_inside_struct(self):
        code = "struct S { int a; void f() { while (i < n) { i++; } } };"
        assert scan_loops(code) == metrics(1, 1, 0)

    def test_access_labels(self):
        code = "class A { public: void f() { for(int i=0;i<n;i++){} } };"
        assert scan_loops(code) == metrics(1, 1, 0)

    def test_goto_label(self):
        assert scan_loops("outer: for(int i=0;i<n;i++){}") == metrics(1, 1, 0)

    def test_lambda_assignment(self):
        code = "auto f = [&](int x) { for (int i = 0; i < x; i++) {} };"
        assert scan_loops(code) == metrics(1, 1, 0)

    def test_keyword_prefix_is_not_a_loop(self):
        assert scan_loops("for_each(v.begin(), v.end(), f); format(x);") == metrics(0, 0, 0)


class TestPreprocessor:

    def test_define_body_is_opaque(self):
        code = "#define REP(i,n) for(int i=0;i<(n);i++)\nint main() { REP(i,n) { } }"
        assert scan_loops(code) == metrics(0, 0, 0)

    def test_line_continuation(self):
        code = "#define LOOP \\\n  for(;;)\nint x;"
        assert scan_loops(code) == metrics(0, 0, 0)

    def test_include_then_code(self):
        code = (
            "#include <bits/stdc++.h>\n"
            "using namespace std;\n"
            "int main(){ for(int i=0;i<n;i++){} }"
        )
        assert scan_loops(code) == metrics(1, 1, 0)


class TestMalformedInput:
    """Broken code yields some metrics, never an exception."""

    def test_missing_closing_brace(self):
        assert scan_loops("for(int i=0;i<n;i++){") == metrics(1, 1, 0)

    def test_unbalanced_header(self):
        assert scan_loops("for(int i=0;i<n;i++") == metrics(0, 0, 0)

    def test_keyword_without_header(self):
        assert scan_loops("while; for x; if") == metrics(0, 0, 0)

    def test_stray_closers_at_top_level(self):
        assert scan_loops("} ) } for(int i=0;i<n;i++){}") == metrics(1, 1, 0)

    def test_do_at_end_of_input(self):
        assert scan_loops("do") == metrics(1, 1, 0)

    def test_deep_braces(self):
        code = "{" * 5000 + "}" * 5000
        assert scan_loops(code) == metrics(0, 0, 0)

    def test_deep_loop_nesting(self):
        code = "for(int i=0;i<n;i++)" * 1500 + ";"
        assert scan_loops(code) == metrics(1500, 1500, 0)

    def test_deep_unclosed_nesting(self):
        code = "for(;;){" * 3000
        assert scan_loops(code) == metrics(3000, 0, 0)

    def test_unclosed_headers_repeated(self):
        code = "for(];" * 2000 + "for(int i=0;i<n;i++){}"
        assert scan_loops(code) == metrics(1, 1, 0)


class TestWhileBodyEvidence:
    """A while body is judged statement by statement as the scan passes it."""

    def test_update_inside_branch(self):
        code = "while (n > 1) { if (n % 2) { odd++; } n /= 2; }"
        assert scan_loops(code) == metrics(1, 0, 1)

    def test_update_after_inner_loop(self):
        code = "while (n > 1) { for(int i=0;i<n;i++){} n /= 2; }"
        assert scan_loops(code) == metrics(2, 1, 1)

    def test_update_inside_inner_loop_belongs_to_inner_loop(self):
        code = "while (n > 1) { while (i < m) { n /= 2; i++; } }"
        assert scan_loops(code) == metrics(2, 2, 0)

    def test_inner_loop_rescaling_its_own_variable(self):
        code = "while (i < n) { while (k > 0) { k >>= 1; } i++; }"
        assert scan_loops(code) == metrics(2, 1, 1)

    def test_single_statement_body(self):
        assert scan_loops("while (x > 0) x = x / 10;") == metrics(1, 0, 1)

    def test_statement_after_loop_does_not_count(self):
        assert scan_loops("while (i < n) i++; n /= 2;") == metrics(1, 1, 0)

    def test_deep_while_nesting(self):
        k = 2000
        code = "while (i < n) {" * k + "i++;" + "}" * k
        assert scan_loops(code) == metrics(k, k, 0)


def _best_time(func, arg, repeat=3):
    best = float("inf")
    for _ in range(repeat):
        start = time.perf_counter()
        func(arg)
        best = min(best, time.perf_counter() - start)
    return best


class TestLinearTime:
    """Eight times the input must cost far less than 64 times the work."""

    def test_nested_while_bodies(self):
        def nested(k):
            return "while (i < n) {" * k + "i++;" + "}" * k

        small = _best_time(scan_loops, nested(500))
        large = _best_time(scan_loops, nested(4000))
        assert large < small * 24

    def test_unclosed_headers(self):
        small = _best_time(scan_loops, "for(];" * 2000)
        large = _best_time(scan_loops, "for(];" * 16000)
        assert large < small * 24

    def test_ordinary_program(self):
        body = "for(int i=0;i<n;i++){ if (a[i] > m) m = a[i]; while (k > 1) k /= 2; }\n"

        def program(k):
            return "int main() {\n" + body * k + "}\n"

        small = _best_time(scan_loops, program(1000))
        large = _best_time(scan_loops, program(8000))
        assert large < small * 24
