import logging
from typing import List, Optional

from courtside.core.exceptions import ValidationError
from courtside.models.participant_model import ParticipantModel
from courtside.models.player_model import PlayerModel
from courtside.models.tournament_model import LIVE_STATUSES, TournamentModel
from courtside.repositories.stores import Stores
from courtside.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class RosterService:
    def __init__(self, stores: Stores, notification_service: Optional[NotificationService] = None,
                 skill_gap_tolerance: float = 0.5):
        self.stores = stores
        self.notification_service = notification_service
        self.skill_gap_tolerance = skill_gap_tolerance

    def list_participants(self, tournament_id: str) -> List[ParticipantModel]:
        return self.stores.participants.filter({"tournament_id": tournament_id}, sort="current_position")

    def join_tournament(self, tournament_id: str, player: PlayerModel, partner_id: Optional[str] = None,
                        team_name: Optional[str] = None) -> ParticipantModel:
        """
        Appends the player to the bottom of the ladder. Doubles teams join as one
        participant: the joining player plus ``partner_id``. Positions are
        ``roster size + 1`` read before the write, so two joins racing each
        other can end up sharing a position.
        """
        tournament = self.stores.tournaments.get(tournament_id)
        if tournament.status not in LIVE_STATUSES:
            raise ValidationError("tournament is not accepting players")

        roster = self.list_participants(tournament.id)
        on_roster = {p.player_id for p in roster} | {p.partner_id for p in roster if p.partner_id}
        if player.id in on_roster:
            raise ValidationError("already joined")

        if tournament.is_positional and tournament.max_participants is not None \
                and len(roster) >= tournament.max_participants:
            raise ValidationError("tournament full")

        if tournament.is_doubles:
            if not partner_id:
                raise ValidationError("a partner is required for doubles")
            if partner_id == player.id:
                raise ValidationError("partner must be a different player")
            self.stores.players.get(partner_id)
            if partner_id in on_roster:
                raise ValidationError("partner already joined")
            if not team_name or not team_name.strip():
                raise ValidationError("a team name is required for doubles")
            team_name = team_name.strip()
        else:
            partner_id = None
            team_name = None

        position = len(roster) + 1
        participant = self.stores.participants.create({
            "tournament_id": tournament.id,
            "player_id": player.id,
            "partner_id": partner_id,
            "team_name": team_name,
            "current_position": position,
            "initial_position": position,
            "points": 0,
            "wins": 0,
            "losses": 0,
        })
        logger.info("Player %s joined tournament %s at position %d", player.id, tournament.id, position)
        return participant

    def requires_skill_confirmation(self, player: PlayerModel, tournament: TournamentModel) -> bool:
        """True when the player's rating is more than the tolerance away from the tournament level."""
        if player.ntrp_rating is None:
            return False
        return abs(player.ntrp_rating - tournament.ntrp_level) > self.skill_gap_tolerance

    def eligible_partners(self, tournament_id: str, player: PlayerModel) -> List[PlayerModel]:
        tournament = self.stores.tournaments.get(tournament_id)
        roster = self.list_participants(tournament.id)
        taken = {p.player_id for p in roster} | {p.partner_id for p in roster if p.partner_id}
        candidates = []
        for candidate in self.stores.players.list(sort="display_name"):
            if candidate.id == player.id or candidate.id in taken or candidate.ntrp_rating is None:
                continue
            if abs(candidate.ntrp_rating - tournament.ntrp_level) <= self.skill_gap_tolerance:
                candidates.append(candidate)
        return candidates

    def invite_partner_by_email(self, tournament_id: str, inviter: PlayerModel, email: str,
                                team_name: Optional[str] = None) -> bool:
        tournament = self.stores.tournaments.get(tournament_id)
        if not tournament.is_doubles:
            raise ValidationError("partner invitations are only for doubles tournaments")
        if self.notification_service is None:
            return False

        subject = f"{inviter.display_name} invited you to play {tournament.name}"
        body = (
            f"{inviter.display_name} would like you as their doubles partner in {tournament.name} "
            f"({tournament.city}, {tournament.state}, NTRP {tournament.ntrp_level}).\n"
        )
        if team_name:
            body += f"Team name: {team_name}\n"
        body += f"Tournament dates: {tournament.start_date} to {tournament.end_date}\n"
        sent = self.notification_service.send_email(email, subject, body)
        if sent:
            logger.info("Player %s invited %s to tournament %s", inviter.id, email, tournament.id)
        return sent
