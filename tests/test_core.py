"""tests/test_core.py"""
import itertools

import pytest
from patron.core.frequency import digit_delay, get_delays, get_frequencies, top_digit
from patron.core.groups import (
    POSITIONS,
    POS_INDICES,
    check_pacha,
    get_group_a,
    get_group_b,
    get_group_c,
    get_group_d,
)
from patron.core.matrix import combine_pairs, generate_matrix, get_diagonal
from patron.core.parser import parse_draws
from patron.core.patterns import Group, PachaPrediction, RepetitionLevel, analyze_patterns


# Newest first
HISTORY_TEXT = "1123\n4567\n8901\n2345\n6789\n1357"


def history():
    return parse_draws(HISTORY_TEXT)


class TestParser:
    def test_splits_on_newline_and_comma(self):
        draws = parse_draws("1234,5678\n9012")
        assert [list(d.digits) for d in draws] == [[1, 2, 3, 4], [5, 6, 7, 8], [9, 0, 1, 2]]
        assert [d.full for d in draws] == ["1234", "5678", "9012"]

    def test_short_tokens_dropped(self):
        draws = parse_draws("123, 4567,\n\n89")
        assert [d.full for d in draws] == ["4567"]

    def test_long_tokens_truncated(self):
        draws = parse_draws("  123456  ")
        assert draws[0].full == "1234"
        assert draws[0].digits == (1, 2, 3, 4)

    def test_non_digit_chars_become_invalid_slots(self):
        draws = parse_draws("12a4")
        assert draws[0].digits == (1, 2, None, 4)
        assert draws[0].full == "12a4"
        assert draws[0].is_valid is False

    def test_empty_text(self):
        assert parse_draws("") == []


class TestFrequency:
    def test_counts_every_occurrence(self):
        freq = get_frequencies(history())
        assert freq[1] == 4       # twice in 1123, once in 8901 and 1357
        assert freq[0] == 1
        assert sum(freq.values()) == 24

    def test_invalid_slots_skipped(self):
        freq = get_frequencies(parse_draws("1a1b"))
        assert freq == {1: 2}

    def test_top_digit_ties_go_to_smaller(self):
        assert top_digit({3: 2, 1: 2, 7: 1}) == 1

    def test_delay_convention(self):
        h = history()
        assert digit_delay(h, 1) == 1          # in the latest draw
        assert digit_delay(h, 4) == 2
        assert digit_delay(h, 0) == 3
        assert digit_delay(parse_draws("1111,2222"), 9) == 3   # never seen → len + 1

    def test_delays_cover_all_digits(self):
        assert set(get_delays(history())) == set(range(10))


class TestPacha:
    def test_check_pacha(self):
        assert check_pacha([1, 2, 3, 4]) is False
        assert check_pacha([1, 1, 2, 3]) is True
        assert check_pacha([5, 5, 5, 5]) is True


class TestGroups:
    def setup_method(self):
        self.h = history()
        self.freq = get_frequencies(self.h)

    def test_group_a_ranked_by_accumulated_freq(self):
        group_a = get_group_a(self.h, self.freq)
        assert [(a.pair, a.best_pos) for a in group_a] == [
            ("11", "12"), ("13", "14"), ("13", "24"),
            ("12", "13"), ("12", "23"), ("23", "34"),
        ]
        assert [a.freq for a in group_a] == [8, 7, 7, 6, 6, 5]

    def test_group_a_pair_count_any_slot(self):
        group_a = {a.pair: a.pair_count for a in get_group_a(self.h, self.freq)}
        assert group_a["11"] == 1
        assert group_a["13"] == 3   # twice in 1123, once in 1357
        assert group_a["23"] == 2

    def test_group_a_forced_pacha_pair(self):
        h = parse_draws("ab12,1111,1345,6789,1000")
        group_a = get_group_a(h, get_frequencies(h))
        assert len(group_a) == 6
        first = group_a[0]
        assert first.pair == "11"
        assert first.freq == 14
        assert first.pair_count == 1
        assert first.best_pos == "12"
        assert "ab" not in [a.pair for a in group_a]

    def test_group_a_no_duplicate_pacha_pair(self):
        h = parse_draws("1223,4567,8901,3456,7890")
        pairs = [a.pair for a in get_group_a(h, get_frequencies(h))]
        assert pairs.count("22") == 1

    def test_group_b_rescue_digits(self):
        group_b = get_group_b(self.h, self.freq)
        assert (group_b.b1, group_b.b2) == (5, 7)

    def test_group_b_fallbacks(self):
        short = parse_draws("1234,5678")
        assert (get_group_b(short, {}).b1, get_group_b(short, {}).b2) == (0, 1)

        same = parse_draws("1234,1234,1234")
        group_b = get_group_b(same, get_frequencies(same))
        assert (group_b.b1, group_b.b2) == (0, 1)

        one = parse_draws("1234,5234,1234")
        group_b = get_group_b(one, get_frequencies(one))
        assert (group_b.b1, group_b.b2) == (5, 1)

    def test_group_c_overdue_ranking(self):
        group_c = get_group_c(self.h, self.freq)
        assert (group_c.c1, group_c.c2) == (0, 8)
        assert group_c.en_fuego == 0
        assert [r.digit for r in group_c.all] == list(range(10))
        assert [r.digit for r in group_c.sorted_by_racha] == [0, 8, 9, 4, 5, 6, 7, 1, 2, 3]
        assert group_c.racha_of(1) == 1
        assert group_c.racha_of(None) == 0

    def test_group_c_absent_digit_saturates(self):
        h = parse_draws("1234,1234,1234,1234,1234")
        group_c = get_group_c(h, get_frequencies(h))
        assert group_c.racha_of(9) == 6
        assert group_c.c1 == 0

    def test_group_d_ranked_by_summed_delay(self):
        group_d = get_group_d(5, 7, 0, 8, self.h)
        assert [d.pair for d in group_d] == ["08", "50", "58", "70", "78", "57"]
        assert [d.sum for d in group_d] == [6, 5, 5, 5, 5, 4]
        assert all(d.delay == d.sum for d in group_d)

    def test_group_d_best_position(self):
        by_pair = {d.pair: d for d in get_group_d(5, 7, 0, 8, self.h)}
        assert by_pair["08"].best_pos == "12"     # never seen
        assert by_pair["08"].pair_count == 0
        assert by_pair["78"].best_pos == "23"
        assert by_pair["57"].best_pos == "24"     # tie with 34, earliest slot wins
        assert by_pair["57"].pair_count == 2


class TestCombinePairs:
    def test_disjoint_slots(self):
        assert combine_pairs("12", "12", "34", "34") == "1234"

    def test_full_overlap_fills_left_to_right(self):
        assert combine_pairs("12", "12", "34", "12") == "1234"

    def test_partial_overlap_uses_relative_digit(self):
        assert combine_pairs("13", "14", "08", "12") == "1803"
        assert combine_pairs("11", "12", "78", "23") == "1187"

    def test_shared_digits_fall_back_to_zero(self):
        assert combine_pairs("12", "12", "21", "13") == "1210"

    @pytest.mark.parametrize("pos1,pos2", list(itertools.product(POSITIONS, POSITIONS)))
    def test_every_slot_combination(self, pos1, pos2):
        out = combine_pairs("12", pos1, "34", pos2)
        assert len(out) == 4 and out.isdigit()
        i, j = POS_INDICES[pos1]
        assert out[i] == "1" and out[j] == "2"
        assert sorted(out) == ["1", "2", "3", "4"]
        if not set(POS_INDICES[pos1]) & set(POS_INDICES[pos2]):
            k, m = POS_INDICES[pos2]
            assert out[k] == "3" and out[m] == "4"


class TestMatrix:
    def setup_method(self):
        h = history()
        freq = get_frequencies(h)
        self.group_a = get_group_a(h, freq)
        self.group_d = get_group_d(5, 7, 0, 8, h)
        self.matrix = generate_matrix(self.group_a, self.group_d)

    def test_shape_and_cells(self):
        assert len(self.matrix) == len(self.group_a)
        assert all(len(row) == len(self.group_d) for row in self.matrix)
        assert all(len(cell) == 4 and cell.isdigit() for row in self.matrix for cell in row)

    def test_known_rows(self):
        assert self.matrix[0] == ("1108", "1150", "1158", "1170", "1187", "1157")
        assert self.matrix[5] == ("0823", "5023", "5823", "7023", "8723", "7523")

    def test_diagonal(self):
        assert get_diagonal(self.matrix) == ["1108", "1053", "5183", "1027", "7128", "7523"]
        assert get_diagonal(()) == []

    def test_deterministic(self):
        assert generate_matrix(self.group_a, self.group_d) == self.matrix


class TestPatterns:
    def setup_method(self):
        self.h = history()
        self.group_a = get_group_a(self.h, get_frequencies(self.h))

    def test_needs_two_draws(self):
        assert analyze_patterns(self.h[:1], self.group_a, 5, 7, 0, 8) is None

    def test_summary(self):
        p = analyze_patterns(self.h, self.group_a, 5, 7, 0, 8)
        assert p.pacha_percent == pytest.approx(100 / 6)
        assert p.pacha_prediction is PachaPrediction.NO_PACHA
        assert p.repetition_percent == 0
        assert p.repetition_level is RepetitionLevel.LOW
        # Nothing transitions → defaults
        assert (p.origin_best, p.target_best) == ("12", "34")
        assert p.origin_percent == 0 and p.target_percent == 0
        assert p.group_hits[Group.A] == pytest.approx(400 / 6)
        assert p.group_hits[Group.B] == pytest.approx(200 / 6)
        assert p.group_hits[Group.C] == pytest.approx(100 / 6)
        assert (p.group_prediction.first, p.group_prediction.second) == (Group.A, Group.B)
        assert p.group_prediction.includes(Group.A)
        assert not p.group_prediction.includes(Group.C)
        assert p.group_prediction.label == "Fuerza en Grupos A y B"

    def test_pacha_prediction(self):
        h = parse_draws("1123,4455,7789")
        p = analyze_patterns(h, [], 0, 1, 2, 3)
        assert p.pacha_percent == 100
        assert p.expects_pacha

    def test_repetition_uses_distinct_shared_digits(self):
        low = analyze_patterns(parse_draws("1123,1456"), [], 0, 1, 2, 3)
        assert low.repetition_percent == 0
        high = analyze_patterns(parse_draws("1234,1256"), [], 0, 1, 2, 3)
        assert high.repetition_percent == 100
        assert high.repetition_level is RepetitionLevel.HIGH

    def test_slot_transitions(self):
        # 12 of the older draw reappears at 34, and 34 reappears at 12
        p = analyze_patterns(parse_draws("5612,1256"), [], 0, 1, 2, 3)
        assert p.origin_best == "12"
        assert p.target_best == "12"
        assert p.origin_percent == 100
        assert p.target_percent == 100

    def test_single_transition(self):
        # 34 of the older draw ("12") opens the newer one
        p = analyze_patterns(parse_draws("1299,5612"), [], 0, 1, 2, 3)
        assert (p.origin_best, p.target_best) == ("34", "12")
        assert p.origin_percent == 100
