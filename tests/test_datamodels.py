import pytest
from pydantic import ValidationError

from conftest import player_payload
from couchlytics.datamodels import (
    DevTrait, Player, PlayerPosition, TradeAssessment, TradeProposal, TradeResult,
    TradeSubmission, TradeToolResult, TradeVerdict
)


class TestPlayer:

    def test_parses_backend_payload(self):
        player = Player.model_validate(player_payload())
        assert player.dev_trait == "Superstar"
        assert player.known_dev_trait == DevTrait.SUPERSTAR
        assert player.known_position == PlayerPosition.QB
        assert player.team_id == 3

    def test_accepts_python_field_names(self):
        player = Player(id=1, name="A", position="CB", dev_trait="Star", team_id=4)
        assert player.dev_trait == "Star"
        assert player.team_id == 4

    def test_is_immutable(self):
        player = Player.model_validate(player_payload())
        with pytest.raises(ValidationError):
            player.ovr = 99

    def test_blank_fields_treated_as_missing(self):
        player = Player.model_validate(player_payload(devTrait="  ", team=None, ovr=None, age=None))
        assert player.dev_trait is None
        assert player.team == ""
        assert player.ovr is None

    def test_numeric_espn_id(self):
        assert Player.model_validate(player_payload(espnId=3916387)).espn_id == "3916387"

    @pytest.mark.parametrize("position", [None, "", "  "])
    def test_missing_position_is_allowed(self, position):
        payload = player_payload()
        payload["position"] = position
        player = Player.model_validate(payload)
        assert player.position is None
        assert player.known_position is None

    def test_position_key_may_be_absent(self):
        player = Player.model_validate({"id": 1, "name": "X", "ovr": 80})
        assert player.position is None

    def test_unknown_position_kept_as_is(self):
        player = Player.model_validate(player_payload(position="ath"))
        assert player.position == "ATH"
        assert player.known_position is None


class TestTradeModels:

    def test_result_serializes_with_wire_names(self):
        result = TradeResult(give_value=10, receive_value=30, net_value=20,
                             verdict=TradeVerdict.YOU_LOSE)
        assert result.model_dump(by_alias=True, mode="json") == {
            "giveValue": 10, "receiveValue": 30, "netValue": 20, "verdict": "You Lose"
        }

    def test_submission_from_proposal(self):
        proposal = TradeProposal.model_validate({
            "givePlayers": [player_payload(id=1)],
            "receivePlayers": [player_payload(id=2), player_payload(id=3)],
        })
        submission = TradeSubmission.from_proposal(42, 10, proposal)
        assert submission.league_id == "42"
        assert submission.trade.give == [1]
        assert submission.trade.receive == [2, 3]
        assert submission.include_suggestions is False

    @pytest.mark.parametrize("server_verdict, agrees", [
        ("Fair", True),
        ("fair ", True),
        ("You Win", False),
        ("Excellent", False),
    ])
    def test_agreement_with_preview(self, server_verdict, agrees):
        preview = TradeResult(give_value=0, receive_value=0, net_value=0, verdict=TradeVerdict.FAIR)
        result = TradeToolResult(trade_assessment=TradeAssessment(
            verdict=server_verdict, team_gives=0, team_receives=0, net_gain=0
        ))
        assert result.agrees_with(preview) is agrees
