"""Tests for implicit arrivals inferred from generated scenes."""

from wayfarer.effects import TravelEffect
from wayfarer.quests import QuestStatus
from wayfarer.session import WorldEventType


def _route_to(session, location_id):
    return next(option.route for option in session.get_available_routes() if option.route.to_id == location_id)


class TestSyncById:
    """Tests for syncing by explicit location id."""

    def test_sync_by_id(self, game_session, recorder):
        """A known id different from the current location is an arrival."""
        game_session.add_hook(recorder)

        moved = game_session.sync_location_from_scene(location_id="T2")

        assert moved is True
        state = game_session.travel_state
        assert state.current_location_id == "T2"
        assert state.current_kingdom_id == 2
        assert "T2" in state.visited_locations
        assert "T2" in state.unlocked_locations
        assert game_session.player_state.current_location_id == "T2"
        sync = recorder.of("location_sync")[0]
        assert (sync.previous_location_id, sync.location_id, sync.matched_by) == ("C1", "T2", "id")
        assert recorder.of("arrival")[0].via == "sync"

    def test_same_location_is_noop(self, game_session):
        """Reporting the current location changes nothing."""
        before = game_session.travel_state

        assert game_session.sync_location_from_scene(location_id="C1") is False
        assert game_session.travel_state is before

    def test_unknown_id_without_name_is_noop(self, game_session):
        """Unknown ids are ignored."""
        assert game_session.sync_location_from_scene(location_id="atlantis") is False

    def test_clears_transit(self, realm_session):
        """An implicit arrival ends the journey in progress."""
        realm_session.travel_to(_route_to(realm_session, "B"))

        assert realm_session.sync_location_from_scene(location_id="B") is True
        assert realm_session.travel_state.traveling is None


class TestSyncByName:
    """Tests for the name-matching fallback."""

    def test_matches_journey_destination(self, realm_session):
        """Scene text containing the destination name counts as arrival."""
        realm_session.travel_to(_route_to(realm_session, "B"))

        moved = realm_session.sync_location_from_scene(location_name="The icy walls of FROSTPEAK")

        assert moved is True
        assert realm_session.travel_state.current_location_id == "B"

    def test_matches_travel_quest_target(self, game_session):
        """Scene text naming the travel-quest target completes the quest."""
        quest = game_session.set_travel_quest_from_scenario("T2", "find the relic")

        moved = game_session.sync_location_from_scene(location_name="Thornwick market square")

        assert moved is True
        assert game_session.ledger.get(quest.id).status is QuestStatus.COMPLETED
        assert game_session.travel_state.travel_quest is None

    def test_unrelated_name_does_not_match(self, game_session):
        """Names of locations that are neither destination nor target are ignored."""
        assert game_session.sync_location_from_scene(location_name="Brenhold") is False
        assert game_session.travel_state.current_location_id == "C1"

    def test_unknown_id_falls_back_to_name(self, game_session):
        """An unresolvable id falls back to name matching."""
        game_session.set_travel_quest_from_scenario("T2", "find the relic")

        assert game_session.sync_location_from_scene(location_id="bogus", location_name="Thornwick") is True


class TestSyncVersusExplicitMove:
    """An explicit move in the same scene always wins."""

    def test_sync_skipped_after_move_in_same_scene(self, game_session, recorder):
        """Sync never overrides a travel:move applied this scene."""
        game_session.add_hook(recorder)
        game_session.process_effects([TravelEffect(action="move", target_location_id="C2")], 3)

        moved = game_session.sync_location_from_scene(location_id="T2")

        assert moved is False
        assert game_session.travel_state.current_location_id == "C2"
        assert recorder.of("location_sync") == []

    def test_sync_allowed_in_later_scene(self, game_session):
        """The guard only covers the scene of the move."""
        game_session.process_effects([TravelEffect(action="move", target_location_id="C2")], 3)
        game_session.process_effects([], 4)

        assert game_session.sync_location_from_scene(location_id="T2") is True
        assert game_session.world_events[-1].type is WorldEventType.ARRIVED
        assert game_session.world_events[-1].data == {"via": "sync"}

    def test_later_scene_without_effects(self, game_session):
        """A sync for a later scene runs even when that scene carried no effects."""
        game_session.process_effects([TravelEffect(action="move", target_location_id="C2")], 5)

        moved = game_session.sync_location_from_scene(location_id="C1", scene_number=6)

        assert moved is True
        assert game_session.scene_number == 6
        assert game_session.travel_state.current_location_id == "C1"

    def test_explicit_scene_number_still_guards_move_scene(self, game_session):
        """Passing the move's own scene number keeps the guard."""
        game_session.process_effects([TravelEffect(action="move", target_location_id="C2")], 5)

        assert game_session.sync_location_from_scene(location_id="C1", scene_number=5) is False
        assert game_session.travel_state.current_location_id == "C2"
