import pytest

from cellisp.evaluation.evaluator import evaluate
from cellisp.types.cell import Closure
from cellisp.types.errors import (
    CellispArityError,
    CellispInvalidSymbol,
    CellispNotApplicable,
    CellispResourceExhausted,
    CellispSyntaxError,
    CellispTypeError,
    CellispUnboundSymbol,
)
from cellisp.types.nil import Nil
from cellisp.types.primitive import Primitive
from cellisp.types.symbol import Symbol


def run(interp, *lines):
    """Run each line as its own cycle; return the printed result of the last."""
    result = None
    for line in lines:
        result = interp.rep(line)
    return result


# -----------------------------------------------------
# Atoms and lookup
# -----------------------------------------------------

def test_self_evaluating_literals(interp):
    assert interp.eval("1") == 1
    assert interp.eval("-7") == -7
    assert interp.eval("#t") is True
    assert interp.eval("#f") is False
    assert interp.eval("()") is Nil


def test_symbol_lookup(interp):
    run(interp, "(define x 42)")
    assert interp.eval("x") == 42
    assert interp.eval("X") == 42
    with pytest.raises(CellispUnboundSymbol):
        interp.eval("z")


# -----------------------------------------------------
# quote
# -----------------------------------------------------

@pytest.mark.parametrize(
    "source,printed",
    [
        ("(quote a)", "a"),
        ("(quote (1 2 3))", "(1 2 3)"),
        ("'(1 2 3)", "(1 2 3)"),
        ("'(undefined-fn (car 5))", "(undefined-fn (car 5))"),
        ("'(a . b)", "(a . b)"),
        ("''a", "(quote a)"),
        ("(QUOTE Hello)", "hello"),
        ("'()", "()"),
    ]
)
def test_quote_returns_form_unevaluated(interp, source, printed):
    assert interp.rep(source) == printed


@pytest.mark.parametrize("source", ["(quote)", "(quote a b)", "(quote . a)"])
def test_quote_requires_exactly_one_operand(interp, source):
    with pytest.raises(CellispSyntaxError):
        interp.eval(source)


# -----------------------------------------------------
# if
# -----------------------------------------------------

@pytest.mark.parametrize(
    "source,expected",
    [
        ("(if #t 1 2)", 1),
        ("(if #f 1 2)", 2),
        ("(if (< 1 2) 10 20)", 10),
        ("(if (> 1 2) 10 20)", 20),
        # Only #f is false.
        ("(if () 1 2)", 1),
        ("(if 0 1 2)", 1),
        ("(if 'f 1 2)", 1),
    ]
)
def test_if_expression(interp, source, expected):
    assert interp.eval(source) == expected


def test_if_never_evaluates_untaken_branch(interp):
    calls = []
    interp.env.define(Symbol("tick!"), Primitive("tick!", lambda env, args: calls.append(1) or 0))

    assert interp.eval("(if #t 1 (tick!))") == 1
    assert interp.eval("(if #f (tick!) 2)") == 2
    assert calls == []
    assert interp.eval("(if #t (tick!) 2)") == 0
    assert calls == [1]


def test_if_untaken_branch_errors_never_surface(interp):
    assert interp.eval("(if #t 1 (car 5))") == 1
    assert interp.eval("(if #f (no-such-function) 2)") == 2


@pytest.mark.parametrize("source", ["(if #f 1)", "(if #t 1)", "(if)", "(if #t 1 2 3)"])
def test_if_requires_both_branches(interp, source):
    with pytest.raises(CellispSyntaxError):
        interp.eval(source)


# -----------------------------------------------------
# define and lambda
# -----------------------------------------------------

def test_define_returns_the_bound_symbol(interp):
    assert interp.eval("(define x 5)") is Symbol("x")
    assert interp.rep("(define (square x) (* x x))") == "square"
    assert interp.eval("x") == 5


def test_define_and_application(interp):
    run(interp, "(DEFINE (SQUARE X) (* X X))")
    assert interp.eval("(SQUARE 5)") == 25
    with pytest.raises(CellispArityError):
        interp.eval("(SQUARE 5 6)")
    with pytest.raises(CellispArityError):
        interp.eval("(square)")


def test_define_value_is_evaluated(interp):
    run(interp, "(define x (+ 1 2))")
    assert interp.eval("x") == 3


def test_factorial(interp):
    run(interp, "(DEFINE (FACT X) (IF (= X 0) 1 (* X (FACT (- X 1)))))")
    assert interp.eval("(FACT 10)") == 3628800
    assert interp.eval("(fact 0)") == 1


def test_case_insensitive_binding(interp):
    run(interp, "(DEFINE (Fact X) (IF (= X 0) 1 (* X (fact (- X 1)))))")
    assert interp.eval("(fact 5)") == 120
    assert interp.eval("(FACT 5)") == 120


def test_lexical_capture_is_frozen_at_creation(interp):
    run(
        interp,
        "(DEFINE (MAKE-ADDER N) (LAMBDA (X) (+ X N)))",
        "(DEFINE ADD5 (MAKE-ADDER 5))",
    )
    assert interp.eval("(ADD5 3)") == 8
    run(interp, "(DEFINE N 100)")
    assert interp.eval("(ADD5 3)") == 8


def test_closure_sees_defining_env_not_callers(interp):
    run(
        interp,
        "(define x 1)",
        "(define (get-x) x)",
        "(define (call-with-x x) (get-x))",
    )
    assert interp.eval("(call-with-x 99)") == 1


def test_lambda_application(interp):
    assert interp.eval("((lambda (x y) (+ x y)) 2 3)") == 5
    assert interp.eval("((lambda () 42))") == 42
    assert isinstance(interp.eval("(lambda (x) x)"), Closure)


def test_lambda_does_not_bind_a_name(interp):
    run(interp, "(lambda (x) x)")
    with pytest.raises(CellispUnboundSymbol):
        interp.eval("x")


def test_multiple_body_forms_and_local_define(interp):
    run(interp, "(define (f x) (define y (* x 2)) (+ y 1))")
    assert interp.eval("(f 3)") == 7
    # The inner define went into the call frame, not the global one.
    with pytest.raises(CellispUnboundSymbol):
        interp.eval("y")


def test_higher_order_functions(interp):
    run(
        interp,
        "(define (twice f x) (f (f x)))",
        "(define (inc n) (+ n 1))",
    )
    assert interp.eval("(twice inc 5)") == 7
    assert interp.eval("(twice (lambda (n) (* n n)) 3)") == 81


def test_recursive_list_building(interp):
    run(
        interp,
        "(define (range-down n) (if (= n 0) () (cons n (range-down (- n 1)))))",
        "(define (sum xs) (if (null? xs) 0 (+ (first xs) (sum (rest xs)))))",
    )
    assert interp.rep("(range-down 5)") == "(5 4 3 2 1)"
    assert interp.eval("(sum (range-down 10))") == 55


@pytest.mark.parametrize(
    "source",
    [
        "(lambda (x x) x)",
        "(lambda (x . rest) x)",
        "(lambda args 1)",
        "(lambda (1) 1)",
        "(lambda (x))",
        "(lambda)",
        "(define (f . args) 1)",
        "(define (f x))",
        "(define x)",
        "(define x 1 2)",
        "(define)",
    ]
)
def test_malformed_special_forms(interp, source):
    with pytest.raises(CellispSyntaxError):
        interp.eval(source)


@pytest.mark.parametrize("source", ["(define 5 1)", "(define (5 x) x)", "(define #t 1)"])
def test_define_needs_a_symbol(interp, source):
    with pytest.raises(CellispInvalidSymbol):
        interp.eval(source)


# -----------------------------------------------------
# application errors
# -----------------------------------------------------

@pytest.mark.parametrize("source", ["(1 2)", "((quote a))", "(#t)", "(() 1)", "('(1 2) 1)"])
def test_not_applicable(interp, source):
    with pytest.raises(CellispNotApplicable):
        interp.eval(source)


def test_improper_application_is_a_syntax_error(interp):
    with pytest.raises(CellispSyntaxError):
        interp.eval("(+ 1 . 2)")


def test_arguments_evaluated_left_to_right(interp):
    seen = []

    def note(env, args):
        seen.append(args[0])
        return args[0]

    interp.env.define(Symbol("note"), Primitive("note", note))
    assert interp.eval("(+ (note 1) (note 2) (note 3))") == 6
    assert seen == [1, 2, 3]


def test_evaluate_python_built_expression(interp):
    heap, env = interp.heap, interp.env
    lam = evaluate(interp.read("(lambda (a b) (+ a b))"), env)
    assert evaluate(heap.make_list([lam, 2, 3]), env) == 5


def test_errors_leave_the_session_usable(interp):
    run(interp, "(define a 1)")
    with pytest.raises(CellispUnboundSymbol):
        interp.eval("(+ a undefined)")
    with pytest.raises(CellispTypeError):
        interp.eval("(first a)")
    assert interp.eval("a") == 1
    assert interp.eval("(+ a 1)") == 2


def test_deep_recursion_is_a_resource_error(interp):
    run(interp, "(define (down n) (if (= n 0) 0 (+ 1 (down (- n 1)))))")
    with pytest.raises(CellispResourceExhausted):
        interp.eval("(down 1000000)")
    assert interp.eval("(down 10)") == 10


def test_runaway_recursion_without_base_case(interp):
    run(interp, "(define (forever n) (forever n))")
    with pytest.raises(CellispResourceExhausted):
        interp.eval("(forever 1)")
