#!/usr/bin/env python3

import dataclasses
import logging
import pathlib
import sys
import typing

import libcst as cst
import libcst.metadata
import libcst._nodes.expression

import config
import options
import range_set
import selection

VERSION = '0.1.0'
STDIN_NAME = '<stdin>'

logger = logging.getLogger(__name__)

def main(argv: typing.Optional[typing.Sequence[str]] = None) -> int:
	logging.basicConfig(level=logging.WARNING, format='%(name)s: %(message)s')
	if argv is None:
		argv = sys.argv[1:]
	try:
		opts = config.parse_args(argv)
	except config.UsageError as e:
		print(f'error: {e}', file=sys.stderr)
		config.make_parser().print_usage(sys.stderr)
		return 2

	if opts.help:
		config.make_parser().print_help(sys.stdout)
		return 0
	if opts.version:
		print(f'fmtreq {VERSION}')
		return 0
	if opts.stdin:
		return _format_stdin(opts)
	return _format_files(opts)

def _format_stdin(opts: options.Options) -> int:
	name = opts.assume_filename or STDIN_NAME
	source = sys.stdin.buffer.read()
	formatted = _format_source(name, source, opts)
	if formatted is None:
		return 1
	changed = formatted != source
	if opts.dry_run:
		if changed:
			print(name)
	else:
		_write_stdout(formatted)
	return 1 if changed and opts.set_exit_if_changed else 0

def _format_files(opts: options.Options) -> int:
	status = 0
	for name in opts.files:
		path = pathlib.Path(name)
		try:
			with path.open('rb') as f:
				source = f.read()
		except OSError as e:
			print(f'{name}: could not read file: {e.strerror}', file=sys.stderr)
			status = 1
			continue
		formatted = _format_source(name, source, opts)
		if formatted is None:
			status = 1
			continue

		changed = formatted != source
		if opts.dry_run:
			if changed:
				print(name)
		elif opts.in_place:
			if changed:
				logger.debug(f'rewriting {name}')
				path.write_bytes(formatted)
		else:
			_write_stdout(formatted)
		if changed and opts.set_exit_if_changed:
			status = 1
	return status

def _write_stdout(formatted: bytes) -> None:
	# output keeps the encoding the source declares
	sys.stdout.flush()
	sys.stdout.buffer.write(formatted)
	sys.stdout.buffer.flush()

def _format_source(name: str, source: bytes, opts: options.Options) -> typing.Optional[bytes]:
	try:
		return format_source(source, opts)
	except cst.ParserSyntaxError as e:
		print(f'{name}:{e.editor_line}:{e.editor_column}: error: {e.message}', file=sys.stderr)
	except selection.SelectionError as e:
		print(f'{name}: error: {e}', file=sys.stderr)
	return None

def beautify(f: typing.BinaryIO, opts: options.Options) -> bytes:
	return format_source(f.read(), opts)

def format_source(source: bytes, opts: options.Options) -> bytes:
	if opts.fix_imports_only:
		return source
	selected = selection.character_ranges(opts, source)
	indent = '    ' if opts.aosp else '\t'
	# positions must be those of `source` itself, so the module is visited exactly as parsed
	module = cst.parse_module(source)
	return cst.MetadataWrapper(module).visit(TreeBeautifier(selected, opts.width, indent)).bytes

SPACE = cst.SimpleWhitespace(' ')
NO_SPACE = cst.SimpleWhitespace('')
MAX_SPLIT_DEPTH = 5

@dataclasses.dataclass(frozen=True)
class Spacing:
	'''Whitespace wanted on each side of a token: True for one space, False for none, None to keep it.'''
	before: typing.Optional[bool]
	after: typing.Optional[bool]
	field_suffix: str = ''

	def apply(self, node: cst.CSTNodeT) -> cst.CSTNodeT:
		changes = {}
		for side, wanted in (('before', self.before), ('after', self.after)):
			if wanted is None:
				continue
			field = f'whitespace_{side}_{self.field_suffix}' if self.field_suffix else f'whitespace_{side}'
			changes[field] = SPACE if wanted else NO_SPACE
		return node.with_changes(**changes)

SPACING: dict[type, Spacing] = {
	cst.Comma: Spacing(before=False, after=True),
	cst.AssignEqual: Spacing(before=False, after=False),
	cst.LeftCurlyBrace: Spacing(before=None, after=False),
	cst.RightCurlyBrace: Spacing(before=False, after=None),
	cst.DictElement: Spacing(before=False, after=True, field_suffix='colon'),
	cst.If: Spacing(before=None, after=False, field_suffix='test'),
}

def _indented_newline(levels: int, indent: str) -> cst.ParenthesizedWhitespace:
	return cst.ParenthesizedWhitespace(cst.TrailingWhitespace(newline=cst.Newline()), indent=True,
		last_line=cst.SimpleWhitespace(indent * levels))

class TreeBeautifier(cst.CSTTransformer):
	METADATA_DEPENDENCIES = (libcst.metadata.ByteSpanPositionProvider, libcst.metadata.ExperimentalReentrantCodegenProvider)

	def __init__(self, selected: typing.Optional[range_set.FrozenRangeSet], width: int, indent: str) -> None:
		self.selected = selected
		self.width = width
		self.indent = indent

	def on_leave(self, orig: cst.CSTNode, node: cst.CSTNode) -> typing.Any:
		node = super().on_leave(orig, node)
		spacing = SPACING.get(type(node))
		if spacing is None or not self._should_format(orig):
			return node
		return spacing.apply(node)

	def leave_SimpleStatementLine(self, orig, node: cst.SimpleStatementLine) -> cst.SimpleStatementLine:
		if not self._should_format(orig):
			return node
		codegen = self.get_metadata(libcst.metadata.ExperimentalReentrantCodegenProvider, orig)
		context = FormatContext(depth=0, split_depth=0, indent=self.indent)
		while context.split_depth < MAX_SPLIT_DEPTH and \
				_width(codegen.get_modified_statement_code(node), self.indent) > self.width:
			context = context.incr_split_depth()
			node = node.with_changes(body=[_format_node(child, context) for child in node.body])
		return node

	def leave_IndentedBlock(self, orig, node: cst.IndentedBlock) -> cst.IndentedBlock:
		# blocks outside the selection keep whatever indent they were parsed with
		if not self._should_format(orig):
			return node
		return node.with_changes(indent=self.indent)

	def _should_format(self, orig: cst.CSTNode) -> bool:
		if self.selected is None:
			return True
		span = self.get_metadata(libcst.metadata.ByteSpanPositionProvider, orig)
		return self.selected.intersects(span.start, span.start + max(span.length, 1))

@dataclasses.dataclass(eq=False, frozen=True)
class FormatContext:
	depth: int
	split_depth: int
	indent: str

	def incr_depth(self) -> 'FormatContext':
		return dataclasses.replace(self, depth=self.depth + 1)

	def incr_split_depth(self) -> 'FormatContext':
		return dataclasses.replace(self, split_depth=self.split_depth + 1)

	def newline(self, levels: int) -> cst.ParenthesizedWhitespace:
		# the enclosing block indentation is added by libcst (indent=True)
		return _indented_newline(levels, self.indent)

def _format_node(node: cst.CSTNode, context: FormatContext) -> cst.CSTNode:
	if isinstance(node, cst.Dict):
		context = context.incr_depth()
		if context.depth == context.split_depth and len(node.elements) > 0:
			return node.with_changes(elements=_split_elements(node.elements, context.newline(context.depth)),
				lbrace=cst.LeftCurlyBrace(whitespace_after=context.newline(context.depth)),
				rbrace=cst.RightCurlyBrace(whitespace_before=context.newline(context.depth - 1)))
		return node.with_changes(elements=[_format_node(element, context) for element in node.elements])
	elif isinstance(node, cst.List):
		context = context.incr_depth()
		if context.depth == context.split_depth and len(node.elements) > 0:
			return node.with_changes(elements=_split_elements(node.elements, context.newline(context.depth)),
				lbracket=cst.LeftSquareBracket(whitespace_after=context.newline(context.depth)),
				rbracket=cst.RightSquareBracket(whitespace_before=context.newline(context.depth - 1)))
		return node.with_changes(elements=[_format_node(element, context) for element in node.elements])
	elif isinstance(node, (cst.Element, cst.DictElement)):
		return node.with_changes(value=_format_node(node.value, context))
	elif isinstance(node, cst.Assign):
		return node.with_changes(value=_format_node(node.value, context))
	elif isinstance(node, cst.Return) and node.value is not None:
		return node.with_changes(value=_format_node(node.value, context))
	return node

Elements = typing.Sequence[libcst._nodes.expression._BaseElementImpl]
def _split_elements(elements: Elements, newline: cst.ParenthesizedWhitespace) -> Elements:
	comma_newline = cst.Comma(whitespace_after=newline)
	new_elements = [element.with_changes(comma=comma_newline) for element in elements[:-1]]
	new_elements.append(elements[-1].with_changes(comma=cst.Comma()))
	return new_elements

def _width(formatted: str, indent: str) -> int:
	'''Widest line of `formatted`, counting each leading indent as four columns.'''
	max_width = 0
	for line in formatted.split('\n'):
		width = 0
		rest = line
		while indent and rest.startswith(indent):
			width += 4
			rest = rest[len(indent):]
		width += len(rest)
		max_width = max(max_width, width)
	return max_width

if __name__ == '__main__':
	sys.exit(main())
