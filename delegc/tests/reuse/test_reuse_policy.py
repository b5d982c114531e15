# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from delegc.core.defs import GenericParamDef
from delegc.core.types import ConstValue, Infer, Named, ParamKind
from delegc.reuse import AmbiguousDefaultParameter, ConflictingParameterBinding, ConstParameterUnspecified
from delegc.reuse.policy import ConstDecision, check_const_argument, ensure_no_defaults, reconcile_binding

N = GenericParamDef("N", ParamKind.CONST, const_type=Named("usize"))
N_DEFAULT = GenericParamDef("N", ParamKind.CONST, default=ConstValue(4), const_type=Named("usize"))


def test_explicit_constant_is_copied() -> None:
	assert check_const_argument(N, ConstValue(3)) is ConstDecision.COPY
	assert check_const_argument(N_DEFAULT, ConstValue(3)) is ConstDecision.COPY


def test_omitted_defaulted_constant_becomes_slot() -> None:
	assert check_const_argument(N_DEFAULT, Infer(ParamKind.CONST, explicit=False)) is ConstDecision.SLOT


@pytest.mark.parametrize("explicit", [False, True])
def test_constant_without_value_or_default_fails(explicit: bool) -> None:
	with pytest.raises(ConstParameterUnspecified) as excinfo:
		check_const_argument(N, Infer(explicit=explicit))
	assert excinfo.value.code == "CONST_PARAMETER_UNSPECIFIED"
	assert "`N`" in excinfo.value.message


def test_placeholder_for_defaulted_constant_is_ambiguous() -> None:
	with pytest.raises(AmbiguousDefaultParameter):
		check_const_argument(N_DEFAULT, Infer())


def test_partially_inferred_constant_fails() -> None:
	with pytest.raises(ConstParameterUnspecified, match="partially inferred"):
		check_const_argument(N, Named("Wrap", (Infer(),)))


def test_reconcile_binding() -> None:
	t = GenericParamDef("T")
	t_default = GenericParamDef("T", default=Named("u8"))
	assert reconcile_binding(t, None, Named("u16")) == Named("u16")
	assert reconcile_binding(t, Named("u16"), Named("u16")) == Named("u16")
	with pytest.raises(ConflictingParameterBinding):
		reconcile_binding(t, Named("u8"), Named("u16"))
	with pytest.raises(AmbiguousDefaultParameter):
		reconcile_binding(t_default, Named("u8"), Named("u16"))


def test_ensure_no_defaults() -> None:
	ensure_no_defaults([GenericParamDef("T")])
	with pytest.raises(AssertionError):
		ensure_no_defaults([GenericParamDef("T", default=Named("u8"))])


def test_error_converts_to_diagnostic() -> None:
	err = ConflictingParameterBinding("pinned twice", notes=("drop one",))
	diag = err.to_diagnostic()
	assert diag.phase == "reuse"
	assert diag.code == "CONFLICTING_PARAMETER_BINDING"
	assert diag.notes == ["drop one"]
	assert str(err) == "[CONFLICTING_PARAMETER_BINDING] pinned twice"
	assert err.to_dict()["code"] == "CONFLICTING_PARAMETER_BINDING"
