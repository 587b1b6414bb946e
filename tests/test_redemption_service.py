import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from juara_loyalty.core.database import Base
from juara_loyalty.core.errors import NotFoundError, PreconditionViolation
from juara_loyalty.models import Member, Redemption, RedemptionStatus
from juara_loyalty.services import member_service, redemption_service


def _reload(session, model, key):
    session.expire_all()
    return session.get(model, key)


def test_create_redemption_stays_pending_without_balance_check(session, make_member) -> None:
    member = make_member(points=10)

    redemption = redemption_service.create_redemption(session, member_id=member.member_id, points_to_redeem=300)
    session.commit()

    assert redemption.status == RedemptionStatus.PENDING
    assert redemption.requested_at is not None
    assert redemption.processed_at is None
    assert redemption.member_code == member.member_code
    assert redemption.member_name == member.name
    assert _reload(session, Member, member.member_id).points == 10


def test_create_redemption_requires_positive_amount(session, make_member) -> None:
    member = make_member(points=500)

    with pytest.raises(PreconditionViolation):
        redemption_service.create_redemption(session, member_id=member.member_id, points_to_redeem=0)


def test_create_redemption_for_unknown_member(session) -> None:
    with pytest.raises(NotFoundError):
        redemption_service.create_redemption(session, member_id="missing", points_to_redeem=300)


def test_approve_deducts_once_and_second_approve_fails(session, make_member) -> None:
    member = make_member(points=450)
    redemption = redemption_service.create_redemption(session, member_id=member.member_id, points_to_redeem=300)
    session.commit()

    approved, balance = redemption_service.approve_redemption(session, redemption_id=redemption.redemption_id)
    session.commit()
    assert approved.status == RedemptionStatus.APPROVED
    assert approved.processed_at is not None
    assert balance == 150

    with pytest.raises(PreconditionViolation) as excinfo:
        redemption_service.approve_redemption(session, redemption_id=redemption.redemption_id)
    session.rollback()

    assert excinfo.value.status_code == 409
    assert _reload(session, Member, member.member_id).points == 150


def test_approve_with_insufficient_balance_changes_nothing(session, make_member) -> None:
    member = make_member(points=100)
    redemption = redemption_service.create_redemption(session, member_id=member.member_id, points_to_redeem=300)
    session.commit()

    with pytest.raises(PreconditionViolation, match="Insufficient points"):
        redemption_service.approve_redemption(session, redemption_id=redemption.redemption_id)
    session.rollback()

    assert _reload(session, Member, member.member_id).points == 100
    stored = _reload(session, Redemption, redemption.redemption_id)
    assert stored.status == RedemptionStatus.PENDING
    assert stored.processed_at is None


def test_balance_is_rechecked_at_approval_time(session, make_member) -> None:
    member = make_member(points=300)
    first = redemption_service.create_redemption(session, member_id=member.member_id, points_to_redeem=300)
    second = redemption_service.create_redemption(session, member_id=member.member_id, points_to_redeem=300)
    session.commit()

    redemption_service.approve_redemption(session, redemption_id=first.redemption_id)
    session.commit()

    with pytest.raises(PreconditionViolation):
        redemption_service.approve_redemption(session, redemption_id=second.redemption_id)
    session.rollback()

    assert _reload(session, Member, member.member_id).points == 0


@pytest.mark.parametrize("points_to_redeem", [1, 300, 10_000])
def test_reject_never_changes_balance(session, make_member, points_to_redeem) -> None:
    member = make_member(points=120)
    redemption = redemption_service.create_redemption(
        session, member_id=member.member_id, points_to_redeem=points_to_redeem
    )
    session.commit()

    rejected, balance = redemption_service.reject_redemption(session, redemption_id=redemption.redemption_id)
    session.commit()

    assert rejected.status == RedemptionStatus.REJECTED
    assert rejected.processed_at is not None
    assert balance == 120
    assert _reload(session, Member, member.member_id).points == 120


def test_terminal_states_cannot_transition(session, make_member) -> None:
    member = make_member(points=500)
    redemption = redemption_service.create_redemption(session, member_id=member.member_id, points_to_redeem=300)
    session.commit()
    redemption_service.reject_redemption(session, redemption_id=redemption.redemption_id)
    session.commit()

    with pytest.raises(PreconditionViolation):
        redemption_service.approve_redemption(session, redemption_id=redemption.redemption_id)
    session.rollback()
    with pytest.raises(PreconditionViolation):
        redemption_service.reject_redemption(session, redemption_id=redemption.redemption_id)
    session.rollback()

    assert _reload(session, Member, member.member_id).points == 500
    assert _reload(session, Redemption, redemption.redemption_id).status == RedemptionStatus.REJECTED


def test_processing_unknown_request_is_not_found(session) -> None:
    with pytest.raises(NotFoundError):
        redemption_service.approve_redemption(session, redemption_id=uuid.uuid4())
    with pytest.raises(NotFoundError):
        redemption_service.reject_redemption(session, redemption_id=uuid.uuid4())


def test_request_redemption_uses_store_threshold_and_gates_on_balance(session, make_member) -> None:
    member = make_member(points=15)

    with pytest.raises(PreconditionViolation, match="Poin tidak cukup"):
        redemption_service.request_redemption(session, member_id=member.member_id)
    session.rollback()

    member_service.add_points(session, member_id=member.member_id, points=285)
    session.commit()

    redemption = redemption_service.request_redemption(session, member_id=member.member_id)
    session.commit()
    assert redemption.points_to_redeem == 300
    assert redemption.status == RedemptionStatus.PENDING
    assert _reload(session, Member, member.member_id).points == 300


def test_request_redemption_refuses_second_pending_request(session, make_member) -> None:
    member = make_member(points=900)
    redemption_service.request_redemption(session, member_id=member.member_id)
    session.commit()

    with pytest.raises(PreconditionViolation) as excinfo:
        redemption_service.request_redemption(session, member_id=member.member_id)
    assert excinfo.value.status_code == 409


def test_snapshot_name_is_not_resynced(session, make_member) -> None:
    member = make_member(name="Old Name", points=400)
    redemption = redemption_service.create_redemption(session, member_id=member.member_id, points_to_redeem=300)
    session.commit()

    member.name = "New Name"
    session.commit()

    assert _reload(session, Redemption, redemption.redemption_id).member_name == "Old Name"


def test_list_redemptions_orders_pending_oldest_first(session, make_member) -> None:
    alice = make_member(name="Alice", points=1000)
    bob = make_member(name="Bob", points=1000)
    first = redemption_service.create_redemption(session, member_id=alice.member_id, points_to_redeem=300)
    second = redemption_service.create_redemption(session, member_id=bob.member_id, points_to_redeem=300)
    session.commit()
    redemption_service.approve_redemption(session, redemption_id=first.redemption_id)
    session.commit()

    pending = redemption_service.list_redemptions(session, status=RedemptionStatus.PENDING)
    assert [r.redemption_id for r in pending] == [second.redemption_id]

    history = redemption_service.list_redemptions(session, member_id=alice.member_id)
    assert [r.status for r in history] == [RedemptionStatus.APPROVED]


def test_request_redemption_rejects_explicit_zero(session, make_member) -> None:
    member = make_member(points=500)

    with pytest.raises(PreconditionViolation, match="must be positive"):
        redemption_service.request_redemption(session, member_id=member.member_id, points_to_redeem=0)
    assert not redemption_service.has_pending_request(session, member.member_id)


@pytest.fixture
def file_session_factory(tmp_path):
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'juara.db'}", future=True)
    Base.metadata.create_all(engine)
    try:
        yield sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    finally:
        engine.dispose()


def test_concurrent_approval_loser_aborts_after_winner_commits(monkeypatch, file_session_factory, auth) -> None:
    with file_session_factory() as setup:
        member, _ = member_service.register_member(
            setup, auth, email="rina@example.com", password="rahasia123", name="Rina", phone="0811"
        )
        member.points = 1000
        redemption = redemption_service.create_redemption(
            setup, member_id=member.member_id, points_to_redeem=300
        )
        setup.commit()
        member_id, redemption_id = member.member_id, redemption.redemption_id

    original = redemption_service._ensure_pending
    raced = []

    def ensure_pending_then_lose_race(session, redemption_id):
        redemption = original(session, redemption_id)
        if not raced:
            raced.append(True)
            with file_session_factory() as winner:
                redemption_service.approve_redemption(winner, redemption_id=redemption_id)
                winner.commit()
        return redemption

    monkeypatch.setattr(redemption_service, "_ensure_pending", ensure_pending_then_lose_race)

    loser = file_session_factory()
    try:
        with pytest.raises(PreconditionViolation, match="Request already processed."):
            redemption_service.approve_redemption(loser, redemption_id=redemption_id)
        loser.rollback()
    finally:
        loser.close()

    with file_session_factory() as check:
        assert check.get(Member, member_id).points == 700
        assert check.get(Redemption, redemption_id).status == RedemptionStatus.APPROVED
