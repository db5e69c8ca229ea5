from concurrent.futures import ThreadPoolExecutor

import pytest

from emitsec.ident import ID, IdGenerator, new_id


def test_generator_starts_after_seed():
    gen = IdGenerator(0)
    assert gen.next() == ID(1)
    assert gen.next() == ID(2)


def test_id_to_string():
    gen = IdGenerator(0)
    assert str(gen.next()) == "01"
    assert str(gen.next()) == "02"


def test_id_to_unique():
    gen = IdGenerator(0)
    first = gen.next()
    second = gen.next()
    assert first.unique(123, "hello") == "F45JPXDSXVRWBUKTDNCCM4PGQI"
    assert second.unique(123, "hello") == "XCFU2OA7OO2COPZOJ5VA6GS6BM"


@pytest.mark.parametrize("value, expected", [(0, "00"), (127, "7F"), (300, "AC02")])
def test_string_is_uvarint_hex(value, expected):
    assert str(ID(value)) == expected


def test_id_rejects_out_of_range():
    with pytest.raises(ValueError):
        ID(-1)
    with pytest.raises(ValueError):
        ID(1 << 64)


def test_generator_wraps_at_64_bits():
    gen = IdGenerator((1 << 64) - 1)
    assert gen.next() == ID(0)


def test_new_id_increases():
    first = new_id()
    second = new_id()
    assert second > first


def test_generator_is_thread_safe():
    gen = IdGenerator(0)

    def draw(_):
        return [gen.next() for _ in range(500)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        batches = list(pool.map(draw, range(8)))

    drawn = [value for batch in batches for value in batch]
    assert len(set(drawn)) == 4000
    assert sorted(drawn) == [ID(n) for n in range(1, 4001)]
    assert gen.next() == ID(4001)