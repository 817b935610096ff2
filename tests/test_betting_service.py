"""Integration tests for BettingService."""
import pytest
from sqlalchemy.orm import Session

from app.models import Bout, BoutResult, BetType, Event, Fighter, UserBet
from app.services.betting_service import BettingService


@pytest.fixture
def bout(db_session: Session) -> Bout:
    left, right = Fighter(name="Merab Dvalishvili"), Fighter(name="Sean O'Malley")
    event = Event(name="UFC 316", date="June 07, 2025", location="Newark")
    db_session.add_all([left, right, event])
    db_session.commit()
    bout = Bout(event_id=event.id, fighter_left_id=left.id, fighter_right_id=right.id)
    db_session.add(bout)
    db_session.commit()
    return bout


@pytest.fixture
def ko(db_session: Session) -> BetType:
    return BettingService(db_session).create_bet_type("KO/TKO", "Knockout or technical knockout")


class TestBetTypes:

    def test_create_and_list_in_id_order(self, db_session: Session):
        service = BettingService(db_session)
        service.create_bet_type("KO/TKO")
        service.create_bet_type("Split Decision", "Split")

        names = [b.name for b in service.get_all_bet_types()]

        assert names == ["KO/TKO", "Split Decision"]

    def test_duplicate_name_is_rejected(self, db_session: Session, ko: BetType):
        assert BettingService(db_session).create_bet_type("KO/TKO") is None
        assert db_session.query(BetType).count() == 1

    def test_get_or_create_reuses_existing(self, db_session: Session, ko: BetType):
        service = BettingService(db_session)

        assert service.get_or_create_bet_type("KO/TKO").id == ko.id

        created = service.get_or_create_bet_type("Unanimous Decision")
        assert created.description == "Result type: Unanimous Decision"
        assert db_session.query(BetType).count() == 2

    def test_get_or_create_survives_concurrent_insert(self, db_session: Session, ko: BetType, monkeypatch):
        service = BettingService(db_session)
        real_find = service.bet_types.find_by_name
        calls = []

        def stale_first_lookup(name):
            calls.append(name)
            return None if len(calls) == 1 else real_find(name)

        monkeypatch.setattr(service.bet_types, "find_by_name", stale_first_lookup)

        assert service.get_or_create_bet_type("KO/TKO").id == ko.id

    def test_get_missing_bet_type(self, db_session: Session):
        assert BettingService(db_session).get_bet_type_by_id(999) is None


class TestPlaceBet:

    def test_second_bet_on_same_key_replaces_prediction(self, db_session: Session, bout: Bout, ko: BetType):
        service = BettingService(db_session)

        service.place_bet("user-1", bout.id, ko.id, bout.fighter_left_id)
        bet = service.place_bet("user-1", bout.id, ko.id, bout.fighter_right_id)

        assert db_session.query(UserBet).count() == 1
        assert bet.predicted_value == bout.fighter_right_id

    def test_different_users_get_separate_rows(self, db_session: Session, bout: Bout, ko: BetType):
        service = BettingService(db_session)

        service.place_bet("user-1", bout.id, ko.id, bout.fighter_left_id)
        service.place_bet("user-2", bout.id, ko.id, bout.fighter_left_id)

        assert len(service.list_bets_for_bout(bout.id)) == 2
        assert [b.user_id for b in service.list_bets_for_user("user-2")] == ["user-2"]

    def test_prediction_must_be_a_fighter_in_the_bout(self, db_session: Session, bout: Bout, ko: BetType):
        with pytest.raises(ValueError):
            BettingService(db_session).place_bet("user-1", bout.id, ko.id, "someone-else")

    def test_unknown_bout_or_bet_type_is_rejected(self, db_session: Session, bout: Bout, ko: BetType):
        service = BettingService(db_session)

        with pytest.raises(ValueError):
            service.place_bet("user-1", "missing-bout", ko.id, bout.fighter_left_id)
        with pytest.raises(ValueError):
            service.place_bet("user-1", bout.id, 999, bout.fighter_left_id)

    def test_concurrent_insert_is_retried_as_update(self, db_session: Session, bout: Bout, ko: BetType, monkeypatch):
        bout_id, bet_type_id = bout.id, ko.id
        left_id, right_id = bout.fighter_left_id, bout.fighter_right_id
        db_session.add(UserBet(
            user_id="user-1",
            bout_id=bout_id,
            bet_type_id=bet_type_id,
            predicted_value=left_id,
        ))
        db_session.commit()
        # Forget the row so the insert below reaches the database, as a
        # concurrent writer's row would
        db_session.expunge_all()

        service = BettingService(db_session)
        real_find = service.bets.find_by_key
        calls = []

        def stale_first_lookup(*key):
            calls.append(key)
            return None if len(calls) == 1 else real_find(*key)

        monkeypatch.setattr(service.bets, "find_by_key", stale_first_lookup)

        bet = service.place_bet("user-1", bout_id, bet_type_id, right_id)

        assert bet is not None
        assert bet.predicted_value == right_id
        assert db_session.query(UserBet).count() == 1


class TestOutcomes:

    def test_record_bet_outcome(self, db_session: Session, bout: Bout, ko: BetType):
        service = BettingService(db_session)
        service.place_bet("user-1", bout.id, ko.id, bout.fighter_left_id)

        bet = service.record_bet_outcome("user-1", bout.id, ko.id, "won")

        assert bet.result == "won"

    def test_record_outcome_for_missing_bet(self, db_session: Session, bout: Bout, ko: BetType):
        assert BettingService(db_session).record_bet_outcome("nobody", bout.id, ko.id, "won") is None

    def test_settle_bout_marks_won_and_lost(self, db_session: Session, bout: Bout, ko: BetType):
        service = BettingService(db_session)
        decision = service.create_bet_type("Unanimous Decision")
        service.place_bet("right-pick", bout.id, ko.id, bout.fighter_left_id)
        service.place_bet("wrong-fighter", bout.id, ko.id, bout.fighter_right_id)
        service.place_bet("wrong-method", bout.id, decision.id, bout.fighter_left_id)
        db_session.add(BoutResult(bout_id=bout.id, winner_id=bout.fighter_left_id, bet_type_id=ko.id, round=2, time="0:51"))
        db_session.commit()

        settled = service.settle_bout(bout.id)

        results = {b.user_id: b.result for b in service.list_bets_for_bout(bout.id)}
        assert settled == 3
        assert results == {"right-pick": "won", "wrong-fighter": "lost", "wrong-method": "lost"}

    def test_settle_without_result_is_a_no_op(self, db_session: Session, bout: Bout, ko: BetType):
        service = BettingService(db_session)
        service.place_bet("user-1", bout.id, ko.id, bout.fighter_left_id)

        assert service.settle_bout(bout.id) == 0
        assert service.list_bets_for_user("user-1")[0].result is None


class TestBetsAroundRecordedResults:

    @pytest.fixture
    def ko_win_for_left(self, db_session: Session, bout: Bout, ko: BetType) -> BoutResult:
        result = BoutResult(bout_id=bout.id, winner_id=bout.fighter_left_id, bet_type_id=ko.id, round=2, time="0:51")
        db_session.add(result)
        db_session.commit()
        return result

    def test_switching_pick_after_settlement_resettles(self, db_session: Session, bout: Bout, ko: BetType):
        service = BettingService(db_session)
        service.place_bet("user-1", bout.id, ko.id, bout.fighter_left_id)
        db_session.add(BoutResult(bout_id=bout.id, winner_id=bout.fighter_left_id, bet_type_id=ko.id, round=2, time="0:51"))
        db_session.commit()
        service.settle_bout(bout.id)
        assert service.list_bets_for_user("user-1")[0].result == "won"

        bet = service.place_bet("user-1", bout.id, ko.id, bout.fighter_right_id)

        assert bet.predicted_value == bout.fighter_right_id
        assert bet.result == "lost"

    def test_late_bet_is_settled_on_placement(self, db_session: Session, bout: Bout, ko: BetType, ko_win_for_left: BoutResult):
        service = BettingService(db_session)

        winner = service.place_bet("user-2", bout.id, ko.id, bout.fighter_left_id)
        loser = service.place_bet("user-3", bout.id, ko.id, bout.fighter_right_id)

        assert winner.result == "won"
        assert loser.result == "lost"

    def test_replaced_pick_without_result_stays_open(self, db_session: Session, bout: Bout, ko: BetType):
        service = BettingService(db_session)
        service.place_bet("user-1", bout.id, ko.id, bout.fighter_left_id)
        service.record_bet_outcome("user-1", bout.id, ko.id, "won")

        bet = service.place_bet("user-1", bout.id, ko.id, bout.fighter_right_id)

        assert bet.result is None
