import argparse
import logging
import typing

import options

logger = logging.getLogger(__name__)

STDIN_FILENAME = '-'

class UsageError(Exception):
	pass

class _ArgumentParser(argparse.ArgumentParser):
	def error(self, message: str) -> typing.NoReturn:
		raise UsageError(message)

def make_parser() -> argparse.ArgumentParser:
	parser = _ArgumentParser(prog='fmtreq', add_help=False, allow_abbrev=False,
			description='Reformat Python source files.')
	parser.add_argument('-i', '-r', '--replace', '--in-place', dest='in_place', action='store_true',
			help='send formatted output back to files, not stdout')
	parser.add_argument('--lines', '--line', action='append', default=[], metavar='START:END',
			help='line range(s) to format, like 5:10 (1-based; default is all lines)')
	parser.add_argument('--offset', action='append', default=[], metavar='OFFSET',
			help='byte offset(s) to format; each must be paired with a --length')
	parser.add_argument('--length', action='append', default=[], metavar='LENGTH',
			help='byte length(s) to format, paired with --offset')
	parser.add_argument('-a', '--aosp', action='store_true',
			help='indent with four spaces instead of tabs')
	parser.add_argument('--line-length', '--width', dest='width', type=int,
			default=options.DEFAULT_WIDTH, metavar='N', help='maximum line width')
	parser.add_argument('--fix-imports-only', action='store_true',
			help='fix import order and remove any unused imports, but do no other formatting')
	parser.add_argument('--skip-sorting-imports', action='store_true',
			help='do not fix the import order')
	parser.add_argument('--skip-removing-unused-imports', action='store_true',
			help='do not remove unused imports')
	parser.add_argument('--skip-reflowing-long-strings', action='store_true',
			help='do not reflow string literals that exceed the line length')
	parser.add_argument('--skip-javadoc-formatting', action='store_true',
			help='do not reformat doc comments')
	parser.add_argument('-n', '--dry-run', action='store_true',
			help='print the paths of the files whose contents would change if the formatter were run normally')
	parser.add_argument('--set-exit-if-changed', action='store_true',
			help='return exit code 1 if there are any formatting changes')
	parser.add_argument('--assume-filename', metavar='NAME',
			help='file name to use for diagnostics when formatting standard input')
	parser.add_argument('-v', '--version', action='store_true', help='print the version')
	parser.add_argument('-h', '--help', action='store_true', help='print this usage statement')
	parser.add_argument('files', nargs='*', metavar='file',
			help='files to format, or - for standard input')
	return parser

def parse_args(argv: typing.Sequence[str]) -> options.Options:
	args = make_parser().parse_intermixed_args(list(argv))
	builder = options.OptionsBuilder()

	stdin = False
	for path in args.files:
		if path == STDIN_FILENAME:
			stdin = True
		else:
			builder.add_file(path)
	if stdin and builder.files:
		raise UsageError('cannot format stdin and files simultaneously')
	if not builder.files:
		stdin = True

	for spec in args.lines:
		for first, last in _parse_line_ranges(spec):
			builder.add_line_range(first, last)
	for offset in _parse_ints(args.offset, '--offset'):
		builder.add_offset(offset)
	for length in _parse_ints(args.length, '--length'):
		builder.add_length(length)

	builder.stdin(stdin).in_place(args.in_place).aosp(args.aosp).width(args.width) \
			.fix_imports_only(args.fix_imports_only) \
			.sort_imports(not args.skip_sorting_imports) \
			.remove_unused_imports(not args.skip_removing_unused_imports) \
			.reflow_long_strings(not args.skip_reflowing_long_strings) \
			.format_javadoc(not args.skip_javadoc_formatting) \
			.dry_run(args.dry_run).set_exit_if_changed(args.set_exit_if_changed) \
			.version(args.version).help(args.help)
	if args.assume_filename is not None:
		builder.assume_filename(args.assume_filename)

	try:
		opts = builder.build()
	except options.OptionsError as e:
		raise UsageError(str(e)) from e
	if not (opts.help or opts.version):
		_check_combinations(opts)
	logger.debug(f'parsed {list(argv)!r} into {opts!r}')
	return opts

def _check_combinations(opts: options.Options) -> None:
	if opts.is_selection and len(opts.files) > 1:
		raise UsageError('partial formatting is only supported for a single file')
	if opts.in_place and opts.stdin:
		raise UsageError('in-place formatting was requested but no files were provided')
	if opts.assume_filename is not None and not opts.stdin:
		raise UsageError('--assume-filename is only supported when formatting standard input')
	if opts.dry_run and opts.in_place:
		raise UsageError('cannot use --dry-run and --in-place at the same time')

def _parse_line_ranges(spec: str) -> typing.Iterator[tuple[int, int]]:
	for part in spec.split(','):
		first_text, sep, last_text = part.partition(':')
		first = _parse_int(first_text, '--lines')
		last = _parse_int(last_text, '--lines') if sep else first
		if first < 1:
			raise UsageError(f'invalid line number {first} in --lines={spec}: lines are 1-based')
		if last < first:
			raise UsageError(f'invalid line range {part!r} in --lines={spec}: end is before start')
		yield first, last

def _parse_ints(values: typing.Iterable[str], flag: str) -> typing.Iterator[int]:
	for value in values:
		for part in value.split(','):
			yield _parse_int(part, flag)

def _parse_int(text: str, flag: str) -> int:
	try:
		return int(text.strip())
	except ValueError:
		raise UsageError(f'invalid integer value for {flag}: {text!r}') from None
