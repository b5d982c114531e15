# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from delegc.core.render import render_predicate
from delegc.reuse import resolve_descriptor
from delegc.reuse.fill import fill_callee
from delegc.reuse.ordering import order_params
from delegc.reuse.predicates import synthesize_predicates
from delegc.reuse.slots import allocate_slots
from delegc.test_helpers import parse_unit


def _predicates(src: str) -> list[str]:
	unit = parse_unit(src)
	desc = resolve_descriptor(unit.decls[-1], unit.table)
	ordered = order_params(allocate_slots(desc), reserved=desc.scope_names)
	filled = fill_callee(desc, ordered)
	return [render_predicate(p) for p in synthesize_predicates(desc, filled)]


def test_receiver_bound_then_container_then_method() -> None:
	src = """
	trait Tr<T: Clone> where T: Debug {
		fn f<U: Into<T>>(&self, x: U) where U: Send;
	}
	reuse Tr::f;
	"""
	assert _predicates(src) == [
		"This: Tr<T>",
		"T: Clone",
		"T: Debug",
		"U: Into<T>",
		"U: Send",
	]


def test_duplicate_predicates_collapse() -> None:
	src = """
	trait Tr<T: Clone> where T: Clone {
		fn f(&self);
	}
	reuse Tr::f;
	"""
	assert _predicates(src) == ["This: Tr<T>", "T: Clone"]


def test_associated_binding_emits_equality() -> None:
	src = """
	trait Source { type Item; fn next(&mut self) -> Self::Item; }
	reuse Source::<Item = u32>::next;
	"""
	assert _predicates(src) == ["This: Source", "<This as Source>::Item == u32"]


def test_bounds_on_pinned_arguments_are_substituted() -> None:
	src = """
	trait Tr<T: Clone> { fn f<U: Into<T>>(x: U); }
	reuse Tr::<Vec<u8>>::f;
	"""
	assert _predicates(src) == ["This: Tr<Vec<u8>>", "Vec<u8>: Clone", "U: Into<Vec<u8>>"]


def test_free_function_copies_only_its_own_bounds() -> None:
	src = "fn f<T: Clone, U>(x: T, y: U) where U: Into<T>; reuse f::<u8>;"
	assert _predicates(src) == ["u8: Clone", "U: Into<u8>"]


def test_projection_in_method_bound_is_qualified() -> None:
	src = """
	trait Iterable { type Item; fn any<F: Predicate<Self::Item>>(&self, f: F) -> bool; }
	reuse Iterable::any;
	"""
	assert _predicates(src) == ["This: Iterable", "F: Predicate<<This as Iterable>::Item>"]
