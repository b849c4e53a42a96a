import bisect
import dataclasses
import typing

def _check_range(start: int, end: int) -> None:
	if start < 0:
		raise ValueError(f'range start must not be negative: [{start}, {end})')
	if end <= start:
		raise ValueError(f'range end must be greater than its start: [{start}, {end})')

class RangeSet:
	'''
	Half-open integer ranges kept sorted, disjoint and non-adjacent.
	Every add() splices the new range into its neighbours, so the stored list is always minimal.
	'''

	def __init__(self) -> None:
		self._spans: list[range] = []

	def add(self, start: int, end: int) -> 'RangeSet':
		_check_range(start, end)
		i = 0
		while i < len(self._spans) and self._spans[i].stop < start:
			i += 1
		j = i
		# ranges that overlap [start, end) or touch either end of it
		while j < len(self._spans) and self._spans[j].start <= end:
			start = min(start, self._spans[j].start)
			end = max(end, self._spans[j].stop)
			j += 1
		self._spans[i:j] = [range(start, end)]
		return self

	def is_empty(self) -> bool:
		return not self._spans

	def freeze(self) -> 'FrozenRangeSet':
		return FrozenRangeSet(tuple(self._spans))

	def __iter__(self) -> typing.Iterator[range]:
		return iter(list(self._spans))

@dataclasses.dataclass(frozen=True)
class FrozenRangeSet:
	spans: tuple[range, ...] = ()
	starts: tuple[int, ...] = dataclasses.field(init=False, repr=False, compare=False)

	def __post_init__(self) -> None:
		prev_stop = None
		for span in self.spans:
			if not isinstance(span, range):
				raise ValueError(f'spans must be range objects: {span!r}')
			_check_range(span.start, span.stop)
			if span.step != 1:
				raise ValueError(f'range step must be 1: {span!r}')
			if prev_stop is not None and span.start <= prev_stop:
				raise ValueError(f'ranges must be sorted, disjoint and non-adjacent: {self.spans!r}')
			prev_stop = span.stop
		object.__setattr__(self, 'starts', tuple(span.start for span in self.spans))

	@classmethod
	def of(cls, *pairs: tuple[int, int]) -> 'FrozenRangeSet':
		builder = RangeSet()
		for start, end in pairs:
			builder.add(start, end)
		return builder.freeze()

	def is_empty(self) -> bool:
		return not self.spans

	def intersects(self, start: int, end: int) -> bool:
		if end <= start:
			return False
		i = bisect.bisect_right(self.starts, start) - 1
		if i >= 0 and self.spans[i].stop > start:
			return True
		return i + 1 < len(self.spans) and self.spans[i + 1].start < end

	def __contains__(self, value: object) -> bool:
		if not isinstance(value, int):
			return False
		i = bisect.bisect_right(self.starts, value) - 1
		return i >= 0 and value in self.spans[i]

	def __iter__(self) -> typing.Iterator[range]:
		return iter(self.spans)

	def __len__(self) -> int:
		return len(self.spans)
