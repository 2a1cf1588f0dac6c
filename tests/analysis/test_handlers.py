"""Tests for contract handler classification."""

import pytest

from anchor_insight.analysis.handlers import (
    has_entry_attribute,
    has_handler_name,
    is_contract_handler,
    takes_request_context,
)
from anchor_insight.config import HandlerRules
from anchor_insight.scanning.syntax import Attribute, FunctionDecl, Parameter


def _fn(name="helper", visibility=None, attributes=(), parameters=()):
    return FunctionDecl(
        name=name,
        visibility=visibility,
        attributes=list(attributes),
        parameters=list(parameters),
    )


class TestAttributeSignal:
    """Entry-point attributes."""

    @pytest.mark.parametrize("path", ["instruction", "handler", "anchor_handler"])
    def test_entry_attribute(self, path):
        """Each entry-point marker classifies a private function as a handler."""
        fn = _fn(attributes=[Attribute(path)])
        assert has_entry_attribute(fn)
        assert is_contract_handler(fn)

    def test_marker_as_single_argument(self):
        """A marker given as the only argument of another attribute counts."""
        fn = _fn(attributes=[Attribute("cfg_attr", ("instruction",))])
        assert is_contract_handler(fn)

    def test_marker_among_several_arguments(self):
        """A marker mixed with other arguments does not count."""
        fn = _fn(attributes=[Attribute("cfg_attr", ("feature", "instruction"))])
        assert not has_entry_attribute(fn)

    def test_unrelated_attribute(self):
        """Ordinary attributes are ignored."""
        fn = _fn(attributes=[Attribute("inline"), Attribute("allow", ("unused",))])
        assert not is_contract_handler(fn)


class TestNamingSignal:
    """Handler-shaped names on public functions."""

    @pytest.mark.parametrize(
        "name",
        [
            "deposit_handler",
            "initialize",
            "initialize_vault",
            "update_price",
            "transfer_tokens",
            "swap",
            "deposit",
            "withdraw_all",
            "validate",
            "execute",
        ],
    )
    def test_public_handler_names(self, name):
        """Recognised name shapes classify public functions."""
        assert is_contract_handler(_fn(name=name, visibility="pub"))

    @pytest.mark.parametrize("name", ["validate_input", "execute_now", "helper", "handler_x"])
    def test_other_names(self, name):
        """Exact names must match exactly; other names never match."""
        assert not has_handler_name(_fn(name=name, visibility="pub"))

    @pytest.mark.parametrize("visibility", [None, "pub(crate)", "pub(super)"])
    def test_requires_plain_pub(self, visibility):
        """Restricted or private visibility disables the naming signal."""
        assert not is_contract_handler(_fn(name="initialize", visibility=visibility))


class TestSignatureSignal:
    """Request-context parameters."""

    @pytest.mark.parametrize(
        "type_path",
        [
            ("Context",),
            ("anchor_lang", "Context"),
            ("anchor_lang", "prelude", "Context"),
        ],
    )
    def test_context_parameter(self, type_path):
        """Context in any qualification classifies without other signals."""
        fn = _fn(parameters=[Parameter("ctx", type_path)])
        assert takes_request_context(fn)
        assert is_contract_handler(fn)

    def test_context_not_first_parameter(self):
        """The context parameter may appear anywhere in the signature."""
        fn = _fn(parameters=[Parameter("self"), Parameter("ctx", ("Context",))])
        assert is_contract_handler(fn)

    def test_other_types(self):
        """Types merely containing Context do not count."""
        fn = _fn(
            parameters=[
                Parameter("a", ("u64",)),
                Parameter("b", ("MyContext",)),
                Parameter("c", ()),
            ]
        )
        assert not is_contract_handler(fn)


class TestClassification:
    """Combined decision."""

    def test_no_signal(self):
        """A function with none of the signals is never a handler."""
        assert not is_contract_handler(_fn(name="compute_fee", visibility="pub"))

    def test_custom_rules(self):
        """Rules come from configuration."""
        rules = HandlerRules(name_prefixes=("compute",), context_type_prefix="Ctx")
        assert is_contract_handler(_fn(name="compute_fee", visibility="pub"), rules)
        assert is_contract_handler(_fn(parameters=[Parameter("c", ("CtxAccounts",))]), rules)
        assert not is_contract_handler(_fn(name="initialize", visibility="pub"), rules)

    def test_parsed_program(self, parse_rust, anchor_program):
        """Handlers in a parsed program are classified by signature."""
        fns = {fn.name: fn for fn in parse_rust(anchor_program).iter_functions()}
        assert is_contract_handler(fns["initialize"])
        assert is_contract_handler(fns["withdraw"])
        # Borrowed context and private visibility: no signal applies
        assert not is_contract_handler(fns["transfer_out"])
