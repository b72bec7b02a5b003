from more_itertools import pairwise

from termon import history

def test_push():
	series = [1, 2]
	out = history.push(series, 3)
	assert out == [1, 2, 3]
	assert series == [1, 2]

def test_push_evicts_oldest():
	series = []
	for value in range(100):
		series = history.push(series, value)
	assert len(series) == history.MAX_LEN
	assert series[0] == 40 and series[-1] == 99
	for a, b in pairwise(series):
		assert b - a == 1

def test_push_short_max_len():
	assert history.push([1, 2, 3], 4, max_len=2) == [3, 4]
	assert history.push([1], 2, max_len=0) == []

def test_from_state():
	assert history.from_state([1, "x", 2.5, None, True, 3]) == [1, 2.5, 3]
	assert history.from_state("garbage") == []
	assert history.from_state(None) == []
	assert history.from_state(list(range(70))) == list(range(10, 70))

def test_from_state_non_finite():
	assert history.from_state([1, float("nan"), float("inf"), 2.5, float("-inf")]) == [1, 2.5]
