# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration-file parser.

Builds a `DefinitionTable` and the list of `ForwardingDecl`s from source text.
The grammar lives in `grammar.lark`; trees are turned into items by the
`_build_*` functions below, which track which generic names are in scope so
parameter references come out as `ParamRef`s owned by the right list.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from delegc.core.defs import (
	BoundPredicate,
	DefinitionError,
	DefinitionTable,
	FnParam,
	FnSig,
	GenericParamDef,
	InterfaceDef,
	Predicate,
	Receiver,
	ReceiverMode,
	StructDef,
	StructField,
)
from delegc.core.diagnostics import Diagnostic
from delegc.core.span import Span
from delegc.core.types import (
	AssocProj,
	ConstValue,
	Infer,
	InterfaceRef,
	Named,
	ParamKind,
	ParamOwner,
	ParamRef,
	RefType,
	Region,
	SelfType,
	TupleType,
	TypeArg,
)
from delegc.reuse.decl import ForwardingDecl, ImplContext, PathSegment, ReceiverTemplate, TargetRef

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")

_PARSER = Lark(
	_GRAMMAR_PATH.read_text(),
	parser="lalr",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)


class ParseError(ValueError):
	"""
	User-facing error for malformed declaration files.

	Raised both for grammar failures and for well-formed but meaningless input
	(duplicate parameters, arguments on a module segment of a type, ...).
	"""

	def __init__(self, message: str, *, span: Span | None = None) -> None:
		super().__init__(message)
		self.span = span or Span()

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(message=str(self), code="PARSE_ERROR", phase="parser", span=self.span)


@dataclass(frozen=True)
class ParsedUnit:
	table: DefinitionTable
	decls: Tuple[ForwardingDecl, ...]


def _name(tree: Tree) -> str:
	return str(tree.data)


def _child(tree: Tree, name: str) -> Optional[Tree]:
	return next((c for c in tree.children if isinstance(c, Tree) and _name(c) == name), None)


def _tokens(tree: Tree, kind: str) -> List[Token]:
	return [c for c in tree.children if isinstance(c, Token) and c.type == kind]


def _region_key(name: str) -> str:
	return f"'{name}"


class _Scope:
	"""Generic names visible at a point, mapped to the ParamRef they denote."""

	def __init__(self, refs: Optional[Dict[str, ParamRef]] = None) -> None:
		self._refs: Dict[str, ParamRef] = dict(refs or {})

	def child(self, params: Iterable[Tuple[str, ParamKind]], owner: ParamOwner) -> "_Scope":
		refs = dict(self._refs)
		for name, kind in params:
			key = _region_key(name) if kind is ParamKind.REGION else name
			refs[key] = ParamRef(name, kind, owner)
		return _Scope(refs)

	def lookup(self, key: str) -> Optional[ParamRef]:
		return self._refs.get(key)


class _UnitBuilder:
	def __init__(self, file: Optional[str]) -> None:
		self.file = file
		self.functions: List[FnSig] = []
		self.interfaces: List[InterfaceDef] = []
		self.structs: List[StructDef] = []
		self.decls: List[ForwardingDecl] = []

	def span(self, node: Tree | Token | None) -> Span:
		if isinstance(node, Tree):
			return Span.from_loc(node.meta, file=self.file)
		return Span.from_loc(node, file=self.file)

	def build(self, tree: Tree) -> ParsedUnit:
		self.items(tree.children, prefix=())
		try:
			table = DefinitionTable.build(functions=self.functions, interfaces=self.interfaces, structs=self.structs)
		except DefinitionError as err:
			raise ParseError(str(err), span=err.span) from err
		return ParsedUnit(table=table, decls=tuple(self.decls))

	# ---- items --------------------------------------------------------------

	def items(self, nodes: Sequence[Tree], *, prefix: Tuple[str, ...]) -> None:
		for node in nodes:
			kind = _name(node)
			if kind == "fn_item":
				self.functions.append(self.fn(node, _Scope(), prefix=prefix))
			elif kind == "trait_item":
				self.interfaces.append(self.trait(node, prefix))
			elif kind == "struct_item":
				self.structs.append(self.struct(node, prefix))
			elif kind == "impl_item":
				self.impl(node)
			elif kind == "mod_item":
				mod_name = str(node.children[0])
				self.items([c for c in node.children[1:] if isinstance(c, Tree)], prefix=prefix + (mod_name,))
			elif kind == "reuse_item":
				self.decls.append(self.reuse(node, _Scope(), impl=None))
			else:
				raise ParseError(f"unexpected item `{kind}`", span=self.span(node))

	def fn(self, node: Tree, scope: _Scope, *, prefix: Tuple[str, ...]) -> FnSig:
		name = str(node.children[0])
		generics: Tuple[GenericParamDef, ...] = ()
		gp = _child(node, "generic_params")
		if gp is not None:
			generics, scope = self.generic_params(gp, scope, ParamOwner.METHOD)
		receiver: Optional[Receiver] = None
		params: List[FnParam] = []
		fp = _child(node, "fn_params")
		for p in fp.children if fp is not None else ():
			kind = _name(p)
			if kind in ("self_value", "self_ref"):
				if receiver is not None or params:
					raise ParseError("`self` must be the first parameter", span=self.span(p))
				receiver = self.receiver(p, scope)
				continue
			pname = str(p.children[0])
			if any(existing.name == pname for existing in params):
				raise ParseError(f"duplicate parameter `{pname}`", span=self.span(p))
			params.append(FnParam(pname, self.type(p.children[1], scope)))
		rt = _child(node, "ret_type")
		ret = self.type(rt.children[0], scope) if rt is not None else None
		wc = _child(node, "where_clause")
		where = self.where(wc, scope) if wc is not None else ()
		return FnSig(
			name="::".join(prefix + (name,)),
			generics=generics,
			params=tuple(params),
			ret=ret,
			receiver=receiver,
			where=where,
			span=self.span(node),
		)

	def receiver(self, node: Tree, scope: _Scope) -> Receiver:
		if _name(node) == "self_value":
			return Receiver(ReceiverMode.VALUE)
		regions = _tokens(node, "REGION")
		region = self.region(regions[0], scope) if regions else None
		mode = ReceiverMode.REF_MUT if _tokens(node, "MUT") else ReceiverMode.REF
		return Receiver(mode, region)

	def trait(self, node: Tree, prefix: Tuple[str, ...]) -> InterfaceDef:
		name = "::".join(prefix + (str(node.children[0]),))
		generics: Tuple[GenericParamDef, ...] = ()
		scope = _Scope()
		gp = _child(node, "generic_params")
		if gp is not None:
			generics, scope = self.generic_params(gp, scope, ParamOwner.CONTAINER)
		wc = _child(node, "where_clause")
		where = self.where(wc, scope) if wc is not None else ()
		assoc: List[str] = []
		methods: List[FnSig] = []
		for member in node.children[1:]:
			if not isinstance(member, Tree):
				continue
			kind = _name(member)
			if kind == "assoc_type_decl":
				aname = str(member.children[0])
				if aname in assoc:
					raise ParseError(f"duplicate associated type `{aname}` in `{name}`", span=self.span(member))
				assoc.append(aname)
			elif kind == "fn_item":
				sig = self.fn(member, scope, prefix=())
				if any(m.name == sig.name for m in methods):
					raise ParseError(f"duplicate method `{sig.name}` in `{name}`", span=self.span(member))
				methods.append(sig)
		return InterfaceDef(
			name=name,
			generics=generics,
			assoc_types=tuple(assoc),
			methods=tuple(methods),
			where=where,
			span=self.span(node),
		)

	def struct(self, node: Tree, prefix: Tuple[str, ...]) -> StructDef:
		name = "::".join(prefix + (str(node.children[0]),))
		generics: Tuple[GenericParamDef, ...] = ()
		scope = _Scope()
		gp = _child(node, "generic_params")
		if gp is not None:
			generics, scope = self.generic_params(gp, scope, ParamOwner.CONTAINER)
		fields: List[StructField] = []
		sf = _child(node, "struct_fields")
		for f in sf.children if sf is not None else ():
			fname = str(f.children[0])
			if any(existing.name == fname for existing in fields):
				raise ParseError(f"duplicate field `{fname}` in `{name}`", span=self.span(f))
			fields.append(StructField(fname, self.type(f.children[1], scope)))
		return StructDef(name=name, generics=generics, fields=tuple(fields), span=self.span(node))

	def impl(self, node: Tree) -> None:
		generics: Tuple[GenericParamDef, ...] = ()
		scope = _Scope()
		gp = _child(node, "generic_params")
		if gp is not None:
			generics, scope = self.generic_params(gp, scope, ParamOwner.IMPL)
		head = next(c for c in node.children if isinstance(c, Tree) and _name(c) not in ("generic_params", "impl_for", "reuse_item"))
		impl_for = _child(node, "impl_for")
		self_node = head
		if impl_for is not None:
			# Only the implementing type is recorded; reuse targets name their interface.
			if _name(head) != "path_type":
				raise ParseError("expected an interface before `for`", span=self.span(head))
			self_node = impl_for.children[0]
		ctx = ImplContext(self_type=self.type(self_node, scope), generics=generics)
		for member in node.children:
			if isinstance(member, Tree) and _name(member) == "reuse_item":
				self.decls.append(self.reuse(member, scope, impl=ctx))

	def reuse(self, node: Tree, scope: _Scope, *, impl: Optional[ImplContext]) -> ForwardingDecl:
		path_node = node.children[0]
		rename_node = _child(node, "rename")
		block = _child(node, "receiver_block")
		receiver = None
		if block is not None:
			receiver = ReceiverTemplate(
				fields=tuple(str(t) for t in _tokens(block, "NAME")),
				span=self.span(block),
			)
		return ForwardingDecl(
			target=TargetRef(self.reuse_segments(path_node, scope), span=self.span(path_node)),
			rename=str(rename_node.children[0]) if rename_node is not None else None,
			receiver=receiver,
			impl=impl,
			span=self.span(node),
		)

	def reuse_segments(self, node: Tree, scope: _Scope) -> Tuple[PathSegment, ...]:
		segments: List[PathSegment] = [PathSegment(str(node.children[0]))]
		for seg in node.children[1:]:
			if _name(seg) == "reuse_seg_name":
				segments.append(PathSegment(str(seg.children[0])))
				continue
			last = segments[-1]
			if last.args is not None or last.bindings:
				raise ParseError(f"`{last.name}` has two generic argument lists", span=self.span(seg))
			args, bindings = self.generic_args(seg.children[0], scope)
			segments[-1] = PathSegment(last.name, args, bindings)
		return tuple(segments)

	# ---- generics -----------------------------------------------------------

	def generic_params(
		self,
		node: Tree,
		scope: _Scope,
		owner: ParamOwner,
	) -> Tuple[Tuple[GenericParamDef, ...], _Scope]:
		heads: List[Tuple[str, ParamKind]] = []
		for entry in node.children:
			kind = _name(entry)
			if kind == "region_param":
				heads.append((str(entry.children[0])[1:], ParamKind.REGION))
			elif kind == "const_param":
				heads.append((str(entry.children[0]), ParamKind.CONST))
			else:
				heads.append((str(entry.children[0]), ParamKind.TYPE))
		seen: set[Tuple[str, bool]] = set()
		for pname, kind in heads:
			key = (pname, kind is ParamKind.REGION)
			if key in seen:
				raise ParseError(f"duplicate generic parameter `{pname}`", span=self.span(node))
			seen.add(key)
		# Bounds and defaults may mention any parameter of the same list.
		inner = scope.child(heads, owner)
		out: List[GenericParamDef] = []
		for entry, (pname, kind) in zip(node.children, heads):
			if kind is ParamKind.REGION:
				out.append(GenericParamDef(pname, kind))
			elif kind is ParamKind.CONST:
				const_type = self.type(entry.children[1], inner)
				lit = _child(entry, "const_lit")
				default = self.const(lit) if lit is not None else None
				out.append(GenericParamDef(pname, kind, default=default, const_type=const_type))
			else:
				bounds_node = _child(entry, "bounds")
				bounds = self.bounds(bounds_node, inner) if bounds_node is not None else ()
				default_node = next(
					(c for c in entry.children[1:] if isinstance(c, Tree) and _name(c) != "bounds"),
					None,
				)
				default = self.type(default_node, inner) if default_node is not None else None
				out.append(GenericParamDef(pname, kind, default=default, bounds=bounds))
		return tuple(out), inner

	def bounds(self, node: Tree, scope: _Scope) -> Tuple[InterfaceRef, ...]:
		return tuple(self.interface_ref(b.children[0], scope) for b in node.children)

	def where(self, node: Tree, scope: _Scope) -> Tuple[Predicate, ...]:
		out: List[Predicate] = []
		for pred in node.children:
			subject = self.type(pred.children[0], scope)
			for bound in self.bounds(pred.children[1], scope):
				out.append(BoundPredicate(subject, bound))
		return tuple(out)

	def generic_args(self, node: Tree, scope: _Scope) -> Tuple[Tuple[TypeArg, ...], Tuple[Tuple[str, TypeArg], ...]]:
		args: List[TypeArg] = []
		bindings: List[Tuple[str, TypeArg]] = []
		for child in node.children:
			if isinstance(child, Tree) and _name(child) == "binding_arg":
				bname = str(child.children[0])
				if any(existing == bname for existing, _v in bindings):
					raise ParseError(f"`{bname}` is bound twice", span=self.span(child))
				bindings.append((bname, self.type(child.children[1], scope)))
			else:
				args.append(self.type(child, scope))
		return tuple(args), tuple(bindings)

	# ---- types --------------------------------------------------------------

	def path_segments(
		self,
		node: Tree,
		scope: _Scope,
	) -> List[Tuple[str, Optional[Tuple[TypeArg, ...]], Tuple[Tuple[str, TypeArg], ...]]]:
		segments: List[Tuple[str, Optional[Tuple[TypeArg, ...]], Tuple[Tuple[str, TypeArg], ...]]] = [
			(str(node.children[0]), None, ())
		]
		for seg in node.children[1:]:
			if _name(seg) == "type_seg_name":
				segments.append((str(seg.children[0]), None, ()))
				continue
			name, args, _bindings = segments[-1]
			if args is not None:
				raise ParseError(f"`{name}` has two generic argument lists", span=self.span(seg))
			args, bindings = self.generic_args(seg.children[0], scope)
			segments[-1] = (name, args, bindings)
		for name, args, _bindings in segments[:-1]:
			if args is not None:
				raise ParseError(f"generic arguments are not allowed on path segment `{name}`", span=self.span(node))
		return segments

	def interface_ref(self, node: Tree, scope: _Scope) -> InterfaceRef:
		segments = self.path_segments(node, scope)
		_name_, args, bindings = segments[-1]
		return InterfaceRef("::".join(s[0] for s in segments), args or (), bindings)

	def path_type(self, node: Tree, scope: _Scope) -> TypeArg:
		segments = self.path_segments(node, scope)
		names = [s[0] for s in segments]
		_last, args, bindings = segments[-1]
		if bindings:
			raise ParseError("associated type bindings are only allowed on interfaces", span=self.span(node))
		if names[0] == "Self":
			if args is not None:
				raise ParseError("`Self` takes no generic arguments", span=self.span(node))
			if len(names) == 1:
				return SelfType()
			if len(names) == 2:
				return AssocProj(names[1])
			raise ParseError(f"unsupported projection `{'::'.join(names)}`", span=self.span(node))
		if len(names) == 1 and args is None:
			ref = scope.lookup(names[0])
			if ref is not None:
				return ref
		return Named("::".join(names), args or ())

	def region(self, tok: Token, scope: _Scope) -> TypeArg:
		name = str(tok)[1:]
		if name == "_":
			return Infer(ParamKind.REGION)
		ref = scope.lookup(_region_key(name))
		if ref is not None:
			return ref
		return Region(name)

	def const(self, node: Tree) -> ConstValue:
		tok = node.children[0]
		if tok.type == "TRUE":
			return ConstValue(True)
		if tok.type == "FALSE":
			return ConstValue(False)
		return ConstValue(int(str(tok)))

	def type(self, node: Tree | Token, scope: _Scope) -> TypeArg:
		if isinstance(node, Token):
			if node.type == "REGION":
				return self.region(node, scope)
			raise ParseError(f"unexpected token `{node}`", span=self.span(node))
		kind = _name(node)
		if kind == "path_type":
			return self.path_type(node, scope)
		if kind == "ref_type":
			regions = _tokens(node, "REGION")
			inner = next(c for c in node.children if isinstance(c, Tree))
			return RefType(
				self.type(inner, scope),
				mutable=bool(_tokens(node, "MUT")),
				region=self.region(regions[0], scope) if regions else None,
			)
		if kind == "tuple_type":
			return TupleType(tuple(self.type(c, scope) for c in node.children if isinstance(c, Tree)))
		if kind == "infer_type":
			return Infer(ParamKind.TYPE)
		if kind == "generic_arg":
			return self.type(node.children[0], scope)
		if kind == "region_arg":
			return self.region(node.children[0], scope)
		if kind == "const_lit":
			return self.const(node)
		if kind == "binding_arg":
			raise ParseError("associated type binding is not allowed here", span=self.span(node))
		raise ParseError(f"unexpected `{kind}` in type position", span=self.span(node))


def parse_source(source: str, *, file: Optional[str] = None) -> ParsedUnit:
	"""Parse a declaration file's text into a definition table and reuse declarations."""
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as err:
		line = getattr(err, "line", None)
		column = getattr(err, "column", None)
		span = Span(file=file, line=line if line and line > 0 else None, column=column if column and column > 0 else None)
		first = str(err).strip().splitlines()[0] if str(err).strip() else "syntax error"
		raise ParseError(f"syntax error: {first}", span=span) from err
	return _UnitBuilder(file).build(tree)


def parse_file(path: Path) -> ParsedUnit:
	return parse_source(path.read_text(), file=str(path))


__all__ = ["ParseError", "ParsedUnit", "parse_file", "parse_source"]
