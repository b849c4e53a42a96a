import dataclasses
import logging
import typing

import range_set

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 100

class OptionsError(ValueError):
	pass

@dataclasses.dataclass(frozen=True)
class Options:
	'''
	What one formatter invocation should do. Built by OptionsBuilder and read-only afterwards.
	`lines` holds 1-based line numbers as half-open ranges; `offsets` and `lengths` pair up by index
	into byte regions.
	'''
	files: tuple[str, ...] = ()
	in_place: bool = False
	lines: range_set.FrozenRangeSet = range_set.FrozenRangeSet()
	offsets: tuple[int, ...] = ()
	lengths: tuple[int, ...] = ()
	aosp: bool = False
	width: int = DEFAULT_WIDTH
	version: bool = False
	help: bool = False
	stdin: bool = False
	fix_imports_only: bool = False
	sort_imports: bool = True
	remove_unused_imports: bool = True
	dry_run: bool = False
	set_exit_if_changed: bool = False
	assume_filename: typing.Optional[str] = None
	reflow_long_strings: bool = True
	format_javadoc: bool = True

	def __post_init__(self) -> None:
		if len(self.offsets) != len(self.lengths):
			raise OptionsError(f'offsets and lengths must be given in pairs: '
					f'got {len(self.offsets)} offsets and {len(self.lengths)} lengths')
		for offset in self.offsets:
			if offset < 0:
				raise OptionsError(f'invalid offset {offset}: must not be negative')
		for length in self.lengths:
			if length <= 0:
				raise OptionsError(f'invalid length {length}: must be positive')
		if self.width <= 0:
			raise OptionsError(f'invalid width {self.width}: must be positive')

	@property
	def is_selection(self) -> bool:
		return not self.lines.is_empty() or len(self.offsets) > 0 or len(self.lengths) > 0

	@property
	def regions(self) -> list[tuple[int, int]]:
		return list(zip(self.offsets, self.lengths))

	@classmethod
	def builder(cls) -> 'OptionsBuilder':
		return OptionsBuilder()

class OptionsBuilder:
	def __init__(self) -> None:
		self.files: list[str] = []
		self.lines = range_set.RangeSet()
		self.offsets: list[int] = []
		self.lengths: list[int] = []
		self.scalars: dict[str, typing.Any] = {
			'in_place': False,
			'aosp': False,
			'width': DEFAULT_WIDTH,
			'version': False,
			'help': False,
			'stdin': False,
			'fix_imports_only': False,
			'sort_imports': True,
			'remove_unused_imports': True,
			'dry_run': False,
			'set_exit_if_changed': False,
			'assume_filename': None,
			'reflow_long_strings': True,
			'format_javadoc': True,
		}

	def add_file(self, path: str) -> 'OptionsBuilder':
		self.files.append(path)
		return self

	def add_files(self, paths: typing.Iterable[str]) -> 'OptionsBuilder':
		self.files.extend(paths)
		return self

	def add_lines(self, start: int, end: int) -> 'OptionsBuilder':
		self.lines.add(start, end)
		return self

	def add_line_range(self, first: int, last: int) -> 'OptionsBuilder':
		'''Add lines first through last, both inclusive.'''
		return self.add_lines(first, last + 1)

	def add_offset(self, offset: int) -> 'OptionsBuilder':
		self.offsets.append(offset)
		return self

	def add_length(self, length: int) -> 'OptionsBuilder':
		self.lengths.append(length)
		return self

	def in_place(self, value: bool) -> 'OptionsBuilder':
		return self._set('in_place', value)

	def aosp(self, value: bool) -> 'OptionsBuilder':
		return self._set('aosp', value)

	def width(self, value: int) -> 'OptionsBuilder':
		return self._set('width', value)

	def version(self, value: bool) -> 'OptionsBuilder':
		return self._set('version', value)

	def help(self, value: bool) -> 'OptionsBuilder':
		return self._set('help', value)

	def stdin(self, value: bool) -> 'OptionsBuilder':
		return self._set('stdin', value)

	def fix_imports_only(self, value: bool) -> 'OptionsBuilder':
		return self._set('fix_imports_only', value)

	def sort_imports(self, value: bool) -> 'OptionsBuilder':
		return self._set('sort_imports', value)

	def remove_unused_imports(self, value: bool) -> 'OptionsBuilder':
		return self._set('remove_unused_imports', value)

	def dry_run(self, value: bool) -> 'OptionsBuilder':
		return self._set('dry_run', value)

	def set_exit_if_changed(self, value: bool) -> 'OptionsBuilder':
		return self._set('set_exit_if_changed', value)

	def assume_filename(self, value: str) -> 'OptionsBuilder':
		return self._set('assume_filename', value)

	def reflow_long_strings(self, value: bool) -> 'OptionsBuilder':
		return self._set('reflow_long_strings', value)

	def format_javadoc(self, value: bool) -> 'OptionsBuilder':
		return self._set('format_javadoc', value)

	def _set(self, name: str, value: typing.Any) -> 'OptionsBuilder':
		self.scalars[name] = value
		return self

	def build(self) -> Options:
		options = Options(files=tuple(self.files), lines=self.lines.freeze(),
				offsets=tuple(self.offsets), lengths=tuple(self.lengths), **self.scalars)
		logger.debug(f'built options for {len(options.files)} file(s), selection={options.is_selection}')
		return options
