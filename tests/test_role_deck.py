import itertools
import random
from collections import Counter

from models import Role
from services.role_deck_service import ROLE_DECK, generate_roles


def test_generate_roles_is_a_permutation_of_the_four_roles():
    for _ in range(200):
        roles = generate_roles()
        assert len(roles) == 4
        assert sorted(roles) == sorted(ROLE_DECK)


def test_generate_roles_returns_a_new_list_each_time():
    first = generate_roles()
    first.clear()
    assert len(generate_roles()) == 4
    assert ROLE_DECK == (Role.RAJA, Role.MANTRI, Role.SIPAHI, Role.CHOR)


def test_generate_roles_is_deterministic_with_injected_rng():
    assert generate_roles(random.Random(42)) == generate_roles(random.Random(42))


def test_all_24_permutations_occur_with_roughly_equal_frequency():
    rng = random.Random(1234)
    trials = 24000
    counts = Counter(tuple(generate_roles(rng)) for _ in range(trials))

    assert set(counts) == set(itertools.permutations(ROLE_DECK))
    # expected 1000 each, standard deviation about 31
    for permutation, count in counts.items():
        assert 800 < count < 1200, (permutation, count)
