import logging
import typing

import options
import range_set

logger = logging.getLogger(__name__)

class SelectionError(ValueError):
	pass

def character_ranges(opts: options.Options, source: bytes) -> typing.Optional[range_set.FrozenRangeSet]:
	'''
	Byte ranges of `source` that `opts` restricts formatting to, or None when the whole file is in scope.
	Selected lines past the end of the source are dropped; offset/length pairs must fit inside it.
	'''
	if not opts.is_selection:
		return None

	line_starts = _line_starts(source)
	line_count = len(line_starts) - 1
	ranges = range_set.RangeSet()
	for lines in opts.lines:
		first = max(lines.start, 1)
		last = min(lines.stop, line_count + 1)
		if first >= last:
			continue
		start = line_starts[first - 1]
		end = line_starts[last - 1]
		if end > start:
			ranges.add(start, end)

	for offset, length in opts.regions:
		if offset + length > len(source):
			raise SelectionError(f'invalid length {length}, offset + length ({offset + length}) '
					f'is outside the file ({len(source)} bytes)')
		ranges.add(offset, offset + length)

	frozen = ranges.freeze()
	logger.debug(f'selection resolves to byte ranges {[(r.start, r.stop) for r in frozen]}')
	return frozen

def _line_starts(source: bytes) -> list[int]:
	starts = [0]
	for line in source.splitlines(keepends=True):
		starts.append(starts[-1] + len(line))
	return starts
