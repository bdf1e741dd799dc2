"""Expression Builder — Turn nesting depths into a Big-O label."""

CONSTANT_EXPRESSION = "O(1)"
LINEARITHMIC_EXPRESSION = "O(N × log N)"

_MULTIPLY = " × "


def _power(term: str, exponent: int) -> str:
    return term if exponent == 1 else f"{term}^{exponent}"


def build_expression(max_linear_depth: int, max_log_depth: int) -> str:
    """
    Build a readable complexity expression from loop depths.

    Examples:
        >>> build_expression(0, 0)
        'O(1)'
        >>> build_expression(2, 0)
        'O(N^2)'
        >>> build_expression(1, 2)
        'O(N × log^2 N)'
    """
    factors = []
    if max_linear_depth > 0:
        factors.append(_power("N", max_linear_depth))
    if max_log_depth > 0:
        factors.append("log N" if max_log_depth == 1 else f"log^{max_log_depth} N")

    if not factors:
        return CONSTANT_EXPRESSION
    return f"O({_MULTIPLY.join(factors)})"
