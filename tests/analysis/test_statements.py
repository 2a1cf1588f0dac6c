"""Tests for total statement counting."""

from anchor_insight.analysis.statements import StatementCounter, statement_count


class TestStatementCount:
    """Statements of a single function."""

    def test_flat_body(self, rust_fn):
        """Every top-level statement counts, including the tail expression."""
        fn = rust_fn(
            """
            fn a() -> u8 {
                let x = 1;
                let y = x + 1;
                log(y);
                y
            }
            """
        )
        assert statement_count(fn) == 4

    def test_empty_body(self, rust_fn):
        assert statement_count(rust_fn("fn a() {}")) == 0

    def test_nested_blocks(self, rust_fn):
        """Statements in branches, loops and match arms count."""
        fn = rust_fn(
            """
            fn a(v: u8) {
                if v > 1 {
                    f();
                    g();
                } else {
                    h();
                }
                for i in 0..v {
                    let j = i;
                }
                match v {
                    0 => { k(); }
                    _ => {}
                }
                {
                    inner();
                }
            }
            """
        )
        # 4 outer statements + 3 in the if + 1 in the for + 1 in the arm + 1 in the block
        assert statement_count(fn) == 10

    def test_formatting_invariant(self, rust_fn):
        """Blank lines and comments never change the count."""
        compact = rust_fn("fn a() { let x = 1; f(x); x }")
        spread = rust_fn(
            """
            fn a() {
                // set up

                let x = 1;   /* trailing */


                // call it
                f(x);
                /// doc-like comment
                x
            }
            """
        )
        assert statement_count(compact) == statement_count(spread) == 3

    def test_comment_like_strings(self, rust_fn):
        """String literals containing comment markers are single statements."""
        fn = rust_fn(
            """
            fn a() {
                let url = "https://example.com // not a comment";
                let block = "/* also not; a comment */";
                msg!("a; b; c");
            }
            """
        )
        assert statement_count(fn) == 3

    def test_closure_statements_belong_to_function(self, rust_fn):
        """Statements inside a closure body count for the enclosing function."""
        fn = rust_fn("fn a() { let f = |x| { let y = x; y }; f(1); }")
        assert statement_count(fn) == 4


class TestNestedDefinitions:
    """Nested functions get their own counts."""

    def test_nested_function(self, rust_fn):
        """A nested fn is one statement of the outer; its body counts for itself."""
        fn = rust_fn(
            """
            fn outer() {
                let a = 1;
                fn inner() {
                    let b = 2;
                    let c = 3;
                    b + c;
                }
                inner();
            }
            """
        )
        counts = [(decl.name, n) for decl, n in StatementCounter().count(fn)]
        assert counts == [("outer", 3), ("inner", 3)]

    def test_nested_impl_methods(self, rust_fn):
        """Methods of an impl inside a body are counted separately."""
        fn = rust_fn(
            """
            fn outer() {
                struct S;
                impl S {
                    fn m(&self) { a(); b(); }
                    fn n(&self) { c(); }
                }
                go();
            }
            """
        )
        counts = [(decl.name, n) for decl, n in StatementCounter().count(fn)]
        assert counts == [("outer", 3), ("m", 2), ("n", 1)]

    def test_counting_resumes_after_nested(self, rust_fn):
        """Statements after a nested definition still count for the outer fn."""
        fn = rust_fn(
            """
            fn outer() {
                fn first() { a(); }
                x();
                fn second() { fn third() { b(); c(); } d(); }
                y();
            }
            """
        )
        counts = [(decl.name, n) for decl, n in StatementCounter().count(fn)]
        assert counts == [("outer", 4), ("first", 1), ("second", 2), ("third", 2)]

    def test_counter_reusable(self, rust_fn):
        """A counter instance can be reused without carrying state."""
        counter = StatementCounter()
        fn = rust_fn("fn a() { f(); g(); }")
        assert counter.count(fn) == counter.count(fn)
