import itertools
import random
import unittest

import range_set

def _points(spans: range_set.FrozenRangeSet) -> set[int]:
	return {n for span in spans for n in span}

class RangeSetTest(unittest.TestCase):
	def test_overlapping_ranges_merge(self) -> None:
		spans = range_set.RangeSet().add(1, 5).add(3, 8).freeze()
		assert spans.spans == (range(1, 8),)

	def test_adjacent_ranges_merge(self) -> None:
		spans = range_set.RangeSet().add(3, 5).add(1, 3).freeze()
		assert spans.spans == (range(1, 5),)

	def test_disjoint_ranges_stay_sorted(self) -> None:
		spans = range_set.RangeSet().add(10, 12).add(1, 2).add(5, 6).freeze()
		assert spans.spans == (range(1, 2), range(5, 6), range(10, 12))

	def test_range_bridging_several_neighbours(self) -> None:
		spans = range_set.RangeSet().add(1, 3).add(5, 7).add(9, 10).add(2, 6).freeze()
		assert spans.spans == (range(1, 7), range(9, 10))

	def test_contained_range_is_absorbed(self) -> None:
		spans = range_set.RangeSet().add(0, 100).add(40, 50).freeze()
		assert spans.spans == (range(0, 100),)

	def test_insertion_order_does_not_matter(self) -> None:
		pairs = [(1, 5), (10, 12), (4, 6), (12, 13), (20, 21)]
		frozen = {range_set.FrozenRangeSet.of(*perm) for perm in itertools.permutations(pairs)}
		assert len(frozen) == 1
		assert frozen.pop().spans == (range(1, 6), range(10, 13), range(20, 21))

	def test_coalescing_keeps_exactly_the_inserted_points(self) -> None:
		rng = random.Random(1234)
		for _ in range(200):
			builder = range_set.RangeSet()
			expected: set[int] = set()
			for _ in range(rng.randint(1, 8)):
				start = rng.randint(0, 40)
				end = start + rng.randint(1, 6)
				builder.add(start, end)
				expected.update(range(start, end))
			frozen = builder.freeze()
			assert _points(frozen) == expected
			for a, b in zip(frozen.spans, frozen.spans[1:]):
				assert a.stop < b.start

	def test_invalid_ranges_are_rejected(self) -> None:
		builder = range_set.RangeSet()
		with self.assertRaises(ValueError):
			builder.add(-1, 2)
		with self.assertRaises(ValueError):
			builder.add(3, 3)
		with self.assertRaises(ValueError):
			builder.add(5, 2)
		assert builder.is_empty()

	def test_freeze_is_a_snapshot(self) -> None:
		builder = range_set.RangeSet().add(1, 2)
		before = builder.freeze()
		builder.add(2, 4)
		assert before.spans == (range(1, 2),)
		assert builder.freeze().spans == (range(1, 4),)

	def test_is_empty(self) -> None:
		assert range_set.RangeSet().is_empty()
		assert range_set.RangeSet().freeze().is_empty()
		assert not range_set.RangeSet().add(0, 1).is_empty()
		assert not range_set.FrozenRangeSet()

class FrozenRangeSetTest(unittest.TestCase):
	def test_membership(self) -> None:
		spans = range_set.FrozenRangeSet.of((1, 5), (10, 12))
		assert 1 in spans
		assert 4 in spans
		assert 5 not in spans
		assert 11 in spans
		assert 12 not in spans
		assert 0 not in spans
		assert 'a' not in spans

	def test_intersects(self) -> None:
		spans = range_set.FrozenRangeSet.of((10, 20), (30, 40))
		assert spans.intersects(15, 16)
		assert spans.intersects(0, 11)
		assert spans.intersects(19, 31)
		assert spans.intersects(35, 100)
		assert not spans.intersects(20, 30)
		assert not spans.intersects(0, 10)
		assert not spans.intersects(40, 50)
		assert not spans.intersects(15, 15)

	def test_starts_are_kept_with_the_snapshot(self) -> None:
		spans = range_set.FrozenRangeSet.of((10, 12), (1, 5))
		assert spans.starts == (1, 10)
		assert spans == range_set.FrozenRangeSet((range(1, 5), range(10, 12)))
		assert 'starts' not in repr(spans)

	def test_iteration_and_len(self) -> None:
		spans = range_set.FrozenRangeSet.of((5, 6), (1, 2))
		assert list(spans) == [range(1, 2), range(5, 6)]
		assert len(spans) == 2

	def test_non_canonical_spans_are_rejected(self) -> None:
		with self.assertRaises(ValueError):
			range_set.FrozenRangeSet((range(1, 5), range(5, 6)))
		with self.assertRaises(ValueError):
			range_set.FrozenRangeSet((range(5, 6), range(1, 2)))
		with self.assertRaises(ValueError):
			range_set.FrozenRangeSet((range(0, 10, 2),))
		with self.assertRaises(ValueError):
			range_set.FrozenRangeSet(((1, 2),))

	def test_is_immutable(self) -> None:
		spans = range_set.FrozenRangeSet.of((1, 2))
		with self.assertRaises(AttributeError):
			spans.spans = ()
