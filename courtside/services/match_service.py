"""Challenge lifecycle for ladder tournaments.

States run proposed -> accepted | cancelled and accepted -> completed.
Completed and cancelled matches never move again. Completing a match
updates up to two participants in separate writes; ``apply_ranking_update``
can be run again for the same match without double counting.
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional, Tuple

from pydantic import BaseModel

from courtside.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from courtside.models._common import ensure_utc, utcnow
from courtside.models.match_model import GameScore, MatchModel, MatchStatus
from courtside.models.participant_model import ParticipantModel
from courtside.models.tournament_model import LIVE_STATUSES, TournamentModel
from courtside.repositories.stores import Stores
from courtside.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

MAX_CHALLENGE_DISTANCE = 3
WIN_POINTS = 20
LOSS_POINTS = 10


class ScoreReport(BaseModel):
    match: MatchModel
    participants: List[ParticipantModel]


class LadderMatchService:
    def __init__(
        self,
        stores: Stores,
        notification_service: Optional[NotificationService] = None,
        clock: Callable[[], datetime] = utcnow,
        proposal_ttl: timedelta = timedelta(days=7),
        min_lead: timedelta = timedelta(hours=1),
        max_horizon: timedelta = timedelta(days=30),
    ):
        self.stores = stores
        self.notification_service = notification_service
        self.clock = clock
        self.proposal_ttl = proposal_ttl
        self.min_lead = min_lead
        self.max_horizon = max_horizon

    def _notify(self, player_id: str, message: str, type: str) -> None:
        if self.notification_service is None:
            return
        player = self.stores.players.first({"id": player_id})
        if player is None:
            return
        self.notification_service.notify(player.user_id, message, type)

    def _notify_side(self, tournament_id: str, side_id: str, message: str, type: str) -> None:
        team = self._participant(tournament_id, side_id)
        self._notify(side_id, message, type)
        if team is not None and team.partner_id:
            self._notify(team.partner_id, message, type)

    def _participant(self, tournament_id: str, player_id: str) -> Optional[ParticipantModel]:
        """The roster entry a player belongs to, as the primary player or as a doubles partner."""
        participant = self.stores.participants.first({"tournament_id": tournament_id, "player_id": player_id})
        if participant is None:
            participant = self.stores.participants.first({"tournament_id": tournament_id, "partner_id": player_id})
        return participant

    def _side(self, match: MatchModel, player_id: str) -> Optional[str]:
        if match.involves(player_id):
            return player_id
        team = self._participant(match.tournament_id, player_id)
        if team is not None and match.involves(team.player_id):
            return team.player_id
        return None

    def get_match(self, match_id: str) -> MatchModel:
        return self.stores.matches.get(match_id)

    def list_matches(self, tournament_id: str, status: Optional[str] = None) -> List[MatchModel]:
        spec = {"tournament_id": tournament_id}
        if status:
            spec["status"] = status
        return self.stores.matches.filter(spec, sort="-created_date")

    def propose_match(
        self,
        tournament_id: str,
        challenger_id: str,
        opponent_id: str,
        proposed_date: datetime,
        proposed_court_ids: Optional[Iterable[str]] = None,
    ) -> MatchModel:
        tournament = self.stores.tournaments.get(tournament_id)
        if tournament.status not in LIVE_STATUSES:
            raise ValidationError("tournament is not accepting challenges")
        if challenger_id == opponent_id:
            raise ValidationError("cannot challenge yourself")

        challenger = self._participant(tournament.id, challenger_id)
        if challenger is None:
            raise ValidationError("challenger is not a participant")
        opponent = self._participant(tournament.id, opponent_id)
        if opponent is None:
            raise ValidationError("opponent is not a participant")
        if challenger.id == opponent.id:
            raise ValidationError("cannot challenge yourself")
        # Matches always name each team by its primary player
        challenger_id, opponent_id = challenger.player_id, opponent.player_id

        if tournament.is_positional:
            distance = challenger.current_position - opponent.current_position
            if not 0 < distance <= MAX_CHALLENGE_DISTANCE:
                raise ValidationError(
                    f"opponent must be 1 to {MAX_CHALLENGE_DISTANCE} positions above the challenger"
                )

        proposed_date = ensure_utc(proposed_date)
        now = self.clock()
        if proposed_date < now + self.min_lead:
            raise ValidationError("proposed date is too soon")
        if proposed_date > now + self.max_horizon:
            raise ValidationError("proposed date is too far in the future")

        match = self.stores.matches.create({
            "tournament_id": tournament.id,
            "challenger_id": challenger_id,
            "opponent_id": opponent_id,
            "status": MatchStatus.PROPOSED.value,
            "proposed_date": proposed_date,
            "proposed_court_ids": list(proposed_court_ids or []),
            "challenger_position_before": challenger.current_position,
            "opponent_position_before": opponent.current_position,
        })
        logger.info("Match %s proposed in tournament %s: %s challenges %s",
                    match.id, tournament.id, challenger_id, opponent_id)
        self._notify_side(tournament.id, opponent_id, f"You have been challenged in {tournament.name}.",
                          "match_proposed")
        return match

    def is_expired(self, match: MatchModel) -> bool:
        return match.status == MatchStatus.PROPOSED.value and self.clock() - match.created_date > self.proposal_ttl

    def respond_to_match(self, match_id: str, responder_id: str, decision: str) -> MatchModel:
        match = self.get_match(match_id)
        if self._side(match, responder_id) != match.opponent_id:
            raise PermissionDeniedError("Only the challenged player can respond to this match")
        if match.status != MatchStatus.PROPOSED.value:
            raise ValidationError("match is not awaiting a response")
        if decision not in ("accept", "decline"):
            raise ValidationError(f"Invalid decision: {decision}")
        if self.is_expired(match):
            self.stores.matches.update(match.id, {"status": MatchStatus.CANCELLED.value})
            logger.info("Match %s expired before a response", match.id)
            raise ValidationError("proposal expired")

        if decision == "accept":
            patch = {"status": MatchStatus.ACCEPTED.value, "confirmed_date": match.proposed_date}
        else:
            patch = {"status": MatchStatus.CANCELLED.value}
        match = self.stores.matches.update(match.id, patch)
        logger.info("Match %s %s by %s", match.id, match.status, responder_id)
        outcome = "accepted" if decision == "accept" else "declined"
        self._notify_side(match.tournament_id, match.challenger_id, f"Your challenge was {outcome}.",
                          f"match_{outcome}")
        return match

    def expire_stale_proposals(self, tournament_id: Optional[str] = None) -> List[MatchModel]:
        spec = {"status": MatchStatus.PROPOSED.value}
        if tournament_id:
            spec["tournament_id"] = tournament_id
        expired = []
        for match in self.stores.matches.filter(spec):
            if self.is_expired(match):
                expired.append(self.stores.matches.update(match.id, {"status": MatchStatus.CANCELLED.value}))
        if expired:
            logger.info("Expired %d stale match proposals", len(expired))
        return expired

    def report_score(self, match_id: str, reporter_id: str, winner_id: str, score: str) -> ScoreReport:
        match = self.get_match(match_id)
        if self._side(match, reporter_id) is None:
            raise PermissionDeniedError("Only the players in this match can report its score")
        winner_id = self._side(match, winner_id)

        if match.status == MatchStatus.COMPLETED.value:
            if match.winner_id != winner_id or match.confirmed is False:
                raise ValidationError("match already completed")
            # Same result reported again: finish any ranking update left undone
            return ScoreReport(match=match, participants=self.apply_ranking_update(match.id))

        if match.status != MatchStatus.ACCEPTED.value:
            raise ValidationError("match must be accepted before a score is reported")
        if winner_id is None:
            raise ValidationError("winner must be the challenger or the opponent")
        if not score or not score.strip():
            raise ValidationError("score is required")

        match = self.stores.matches.update(match.id, {
            "status": MatchStatus.COMPLETED.value,
            "winner_id": winner_id,
            "score": score.strip(),
            "reported_by": reporter_id,
        })
        logger.info("Match %s completed, winner %s (%s)", match.id, winner_id, match.score)
        participants = self.apply_ranking_update(match.id)

        self._notify_result(match)
        return ScoreReport(match=match, participants=participants)

    def _notify_result(self, match: MatchModel) -> None:
        loser_id = match.other_player(match.winner_id)
        self._notify_side(match.tournament_id, match.winner_id, f"Result recorded: you won {match.score}.",
                          "match_result")
        self._notify_side(match.tournament_id, loser_id, f"Result recorded: you lost {match.score}.",
                          "match_result")

    def _ranking_patches(self, tournament: TournamentModel, match: MatchModel,
                         challenger: ParticipantModel, opponent: ParticipantModel) -> Tuple[dict, dict]:
        challenger_won = match.winner_id == match.challenger_id
        if not tournament.is_positional:
            winner, loser = (challenger, opponent) if challenger_won else (opponent, challenger)
            patches = {
                winner.id: {"points": winner.points + WIN_POINTS, "wins": winner.wins + 1},
                loser.id: {"points": loser.points + LOSS_POINTS, "losses": loser.losses + 1},
            }
            return patches[challenger.id], patches[opponent.id]

        if not challenger_won:
            return {"losses": challenger.losses + 1}, {"wins": opponent.wins + 1}

        challenger_patch = {"wins": challenger.wins + 1}
        opponent_patch = {"losses": opponent.losses + 1}
        before_c = match.challenger_position_before
        before_o = match.opponent_position_before
        if before_c is not None and before_o is not None and before_c > before_o:
            challenger_patch["current_position"] = before_o
            opponent_patch["current_position"] = before_c
        return challenger_patch, opponent_patch

    def apply_ranking_update(self, match_id: str) -> List[ParticipantModel]:
        """
        Applies a completed match's result to both participants.

        Each participant write carries the match id in ``applied_match_ids``
        and a participant that already lists it is left alone, so this is
        safe to call again after a partial failure. Returns the challenger's
        and the opponent's participant records in that order.
        """
        match = self.get_match(match_id)
        if match.status != MatchStatus.COMPLETED.value or not match.winner_id:
            raise ValidationError("match is not completed")
        if match.confirmed is False:
            raise ValidationError("match result is awaiting confirmation")
        tournament = self.stores.tournaments.get(match.tournament_id)

        challenger = self._participant(tournament.id, match.challenger_id)
        opponent = self._participant(tournament.id, match.opponent_id)
        if challenger is None:
            raise NotFoundError("Participant", match.challenger_id)
        if opponent is None:
            raise NotFoundError("Participant", match.opponent_id)

        patches = self._ranking_patches(tournament, match, challenger, opponent)
        updated = []
        for participant, patch in zip((challenger, opponent), patches):
            if match.id in participant.applied_match_ids:
                logger.debug("Match %s already applied to participant %s", match.id, participant.id)
                updated.append(participant)
                continue
            patch["applied_match_ids"] = participant.applied_match_ids + [match.id]
            updated.append(self.stores.participants.update(participant.id, patch))
        logger.info("Ranking update for match %s applied in tournament %s", match.id, tournament.id)
        return updated

    def report_game_scores(self, match_id: str, reporter_id: str, game_scores: List[GameScore]) -> MatchModel:
        """Records a game-by-game result; the other side confirms it with ``confirm_result``."""
        match = self.get_match(match_id)
        reporter_side = self._side(match, reporter_id)
        if reporter_side is None:
            raise PermissionDeniedError("Only the players in this match can report its score")
        if match.status != MatchStatus.ACCEPTED.value:
            raise ValidationError("match must be accepted before a score is reported")

        games = [
            GameScore.model_validate(g) if not isinstance(g, GameScore) else g
            for g in game_scores
        ]
        games = [g for g in games if g.team1_score or g.team2_score]
        if not games:
            raise ValidationError("at least one game must have a score")
        games = [
            GameScore(game_number=n, team1_score=g.team1_score, team2_score=g.team2_score)
            for n, g in enumerate(games, start=1)
        ]

        team1_games = sum(1 for g in games if g.team1_score > g.team2_score)
        team2_games = sum(1 for g in games if g.team2_score > g.team1_score)
        if team1_games == team2_games:
            raise ValidationError("game scores do not produce a winner")
        winner_id = match.challenger_id if team1_games > team2_games else match.opponent_id

        match = self.stores.matches.update(match.id, {
            "game_scores": [g.model_dump() for g in games],
            "team1_score": team1_games,
            "team2_score": team2_games,
            "winner_id": winner_id,
            "score": ", ".join(f"{g.team1_score}-{g.team2_score}" for g in games),
            "status": MatchStatus.COMPLETED.value,
            "confirmed": False,
            "reported_by": reporter_id,
        })
        logger.info("Match %s game scores reported by %s, awaiting confirmation", match.id, reporter_id)
        self._notify_side(match.tournament_id, match.other_player(reporter_side),
                          "A match result is waiting for your confirmation.", "result_pending")
        return match

    def confirm_result(self, match_id: str, player_id: str) -> MatchModel:
        """Confirms a game-score result and applies it to the ladder."""
        match = self.get_match(match_id)
        side = self._side(match, player_id)
        if side is None:
            raise PermissionDeniedError("Only the players in this match can confirm its result")
        if match.confirmed is not False:
            raise ValidationError("match has no result awaiting confirmation")
        if side == self._side(match, match.reported_by):
            raise PermissionDeniedError("The reporting team cannot confirm its own result")

        match = self.stores.matches.update(match.id, {"confirmed": True, "confirmed_by": player_id})
        logger.info("Match %s result confirmed by %s", match.id, player_id)
        self.apply_ranking_update(match.id)
        self._notify_result(match)
        return match
