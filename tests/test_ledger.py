import random

import pytest

from forum.core.exceptions import Forbidden, InvalidArgument, NotFound
from forum.db.session import SessionLocal
from forum.models.post import Post
from forum.services import ledger


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


@pytest.fixture
def post(make_post, alice):
    return make_post(alice)


def test_first_upvote_sets_score(db, post, bob):
    post = ledger.apply_vote(post, bob.id, "up", db)

    assert post.upvoters == [bob.id]
    assert post.downvoters == []
    assert post.score == 1


def test_voting_same_direction_twice_clears_vote(db, post, bob):
    ledger.apply_vote(post, bob.id, "up", db)
    post = ledger.apply_vote(post, bob.id, "up", db)

    assert bob.id not in post.upvoters
    assert bob.id not in post.downvoters
    assert post.score == 0


def test_opposite_vote_switches_direction(db, post, bob):
    post = ledger.apply_vote(post, bob.id, "up", db)
    assert post.score == 1

    post = ledger.apply_vote(post, bob.id, "down", db)

    assert post.downvoters == [bob.id]
    assert post.upvoters == []
    assert post.score == -1


@pytest.mark.parametrize("start, vote, expected", [
    (None, "up", "up"),
    (None, "down", "down"),
    ("up", "up", None),
    ("up", "down", "down"),
    ("down", "up", "up"),
    ("down", "down", None),
])
def test_vote_transition_table(db, post, bob, start, vote, expected):
    if start:
        ledger.apply_vote(post, bob.id, start, db)

    post = ledger.apply_vote(post, bob.id, vote, db)

    state = ledger.current_vote(post, bob.id)
    assert (state.direction if state else None) == expected


def test_two_voters_scenario(db, post, alice, bob):
    assert ledger.apply_vote(post, alice.id, "up", db).score == 1
    assert ledger.apply_vote(post, bob.id, "down", db).score == 0
    assert ledger.apply_vote(post, alice.id, "down", db).score == -2


def test_invalid_direction_is_rejected(db, post, bob):
    with pytest.raises(InvalidArgument) as exc:
        ledger.apply_vote(post, bob.id, "sideways", db)

    assert exc.value.status_code == 400
    assert post.votes == []


def test_random_vote_sequences_keep_invariants(db, post, make_user):
    rng = random.Random(1234)
    users = [make_user(f"voter{i}") for i in range(5)]

    for _ in range(60):
        voter = rng.choice(users)
        post = ledger.apply_vote(post, voter.id, rng.choice(["up", "down"]), db)

        assert not set(post.upvoters) & set(post.downvoters)
        assert post.score == len(post.upvoters) - len(post.downvoters)


def test_like_is_its_own_inverse(db, post, bob):
    before = list(post.likers)

    post = ledger.toggle_like(post, bob.id, db)
    assert post.likers == before + [bob.id]

    post = ledger.toggle_like(post, bob.id, db)
    assert post.likers == before


def test_like_is_independent_of_votes(db, post, bob):
    ledger.apply_vote(post, bob.id, "down", db)
    post = ledger.toggle_like(post, bob.id, db)

    assert post.likers == [bob.id]
    assert post.downvoters == [bob.id]
    assert post.score == -1


def test_add_comment_prepends(db, post, alice, bob):
    post, first = ledger.add_comment(post, alice.id, "first!", db)
    post, second = ledger.add_comment(post, bob.id, "  second  ", db)

    assert [c.id for c in post.comments] == [second.id, first.id]
    assert post.comments[0].content == "second"
    assert post.score == 0


def test_blank_comment_is_rejected(db, post, bob):
    with pytest.raises(InvalidArgument):
        ledger.add_comment(post, bob.id, "   ", db)

    assert post.comments == []


def test_delete_comment_by_non_author_is_forbidden(db, post, alice, bob):
    post, comment = ledger.add_comment(post, alice.id, "mine", db)

    with pytest.raises(Forbidden):
        ledger.delete_comment(post, bob.id, comment.id, db)

    db.expire_all()
    assert [c.id for c in post.comments] == [comment.id]


def test_delete_missing_comment(db, post, alice):
    with pytest.raises(NotFound):
        ledger.delete_comment(post, alice.id, 999, db)


def test_author_deletes_comment(db, post, alice):
    post, comment = ledger.add_comment(post, alice.id, "oops", db)
    post = ledger.delete_comment(post, alice.id, comment.id, db)

    assert post.comments == []


def delete_elsewhere(post_id):
    other = SessionLocal()
    try:
        other.delete(other.get(Post, post_id))
        other.commit()
    finally:
        other.close()


@pytest.mark.filterwarnings("ignore::sqlalchemy.exc.SAWarning")
@pytest.mark.parametrize("earlier, mutate", [
    (None, lambda post, user_id, db: ledger.apply_vote(post, user_id, "up", db)),
    ("up", lambda post, user_id, db: ledger.apply_vote(post, user_id, "down", db)),
    (None, lambda post, user_id, db: ledger.toggle_like(post, user_id, db)),
    (None, lambda post, user_id, db: ledger.add_comment(post, user_id, "too late", db)),
], ids=["new-vote", "switch-vote", "like", "comment"])
def test_post_deleted_before_write_is_not_found(db, post, bob, earlier, mutate):
    if earlier:
        post = ledger.apply_vote(post, bob.id, earlier, db)
    post_id = post.id

    delete_elsewhere(post_id)

    with pytest.raises(NotFound) as exc:
        mutate(post, bob.id, db)

    assert exc.value.status_code == 404
    assert db.get(Post, post_id) is None
