"""Tests for the game session orchestrator."""

from wayfarer.config import Settings
from wayfarer.effects import QuestEffect, StatEffect, TravelEffect
from wayfarer.observability import RichConsoleObserver
from wayfarer.quests import FailureConsequences, QuestRewards, QuestStatus, QuestType
from wayfarer.session import GameSession, GameState, WorldEventType
from tests.factories import create_quest, create_travel_objective


def _route_to(session, location_id):
    return next(option.route for option in session.get_available_routes() if option.route.to_id == location_id)


class TestSessionStart:
    """Tests for session construction."""

    def test_start_state(self, game_session):
        """A new session starts idle at C1 with a fresh player."""
        assert game_session.travel_state.current_location_id == "C1"
        assert game_session.travel_state.unlocked_locations == {"C1"}
        assert game_session.player_state.stats.gold == 50
        assert game_session.player_state.current_location_id == "C1"
        assert game_session.quests == ()
        assert game_session.active_quest_id is None

    def test_player_defaults_from_settings(self, two_kingdom_world):
        """Starting stats come from settings."""
        settings = Settings(_env_file=None, starting_gold=7, starting_health=60)

        session = GameSession.start(two_kingdom_world, "C1", 1, settings=settings)

        assert session.player_state.stats.gold == 7
        assert session.player_state.stats.health == 60

    def test_console_observer_setting(self, two_kingdom_world):
        """The console observer is attached when enabled."""
        settings = Settings(_env_file=None, console_observer=True)

        session = GameSession.start(two_kingdom_world, "C1", 1, settings=settings)

        assert any(isinstance(hook, RichConsoleObserver) for hook in session.hook.hooks)

    def test_console_observer_with_bracketed_names(self, two_kingdom_world, capsys):
        """Generated names that look like markup neither abort the batch nor break rendering."""
        settings = Settings(_env_file=None, console_observer=True)
        session = GameSession.start(two_kingdom_world, "C1", 1, settings=settings)

        session.process_effects(
            [
                {"kind": "item", "action": "add", "itemName": "Blade [/bold]"},
                {"kind": "stat", "attribute": "gold", "change": 5},
            ],
            1,
        )

        assert session.player_state.find_item("Blade [/bold]") is not None
        assert session.player_state.stats.gold == 55
        assert "Gained: Blade [/bold]" in capsys.readouterr().out

    def test_snapshot(self, game_session):
        """The snapshot composes the whole state."""
        snapshot = game_session.snapshot()

        assert isinstance(snapshot, GameState)
        assert snapshot.travel == game_session.travel_state
        assert snapshot.player == game_session.player_state
        assert snapshot.scene_number == 0

    def test_reinitialize(self, game_session, require_relic):
        """Reinitializing resets travel, quests and player."""
        game_session.process_effects([require_relic, StatEffect(attribute="gold", change=-20)], 2)

        game_session.reinitialize("C2", 2)

        assert game_session.travel_state.current_location_id == "C2"
        assert game_session.travel_state.unlocked_locations == {"C2", "T2"}
        assert game_session.quests == ()
        assert game_session.world_events == ()
        assert game_session.player_state.stats.gold == 50

    def test_reinitialize_unknown_kingdom(self, game_session, caplog):
        """An unknown kingdom leaves the session untouched."""
        before = game_session.travel_state

        game_session.reinitialize("X", 99)

        assert game_session.travel_state is before
        assert "unknown kingdom" in caplog.text


class TestQueries:
    """Tests for session queries."""

    def test_available_routes_exclude_locked_foreign(self, game_session):
        """With only C1 unlocked, routes into K2 are all locked."""
        options = game_session.get_available_routes()

        assert {option.route.to_id for option in options} == {"C2", "T2"}
        assert not any(option.route.is_unlocked for option in options)
        assert {option.target_name for option in options} == {"Brenhold", "Thornwick"}

    def test_travel_paths(self, realm_session):
        """Kingdom paths cover the current kingdom only."""
        assert [line.to_id for line in realm_session.get_travel_paths()] == ["M", "A", "B"]
        assert len(realm_session.get_travel_paths(kingdom_only=False)) == 5

    def test_current_location_and_kingdom(self, game_session):
        """Current location and kingdom resolve from the world."""
        assert game_session.get_current_location().name == "Aldhaven"
        assert game_session.get_current_kingdom().name == "Aldmark"

    def test_travel_quest_target(self, game_session):
        """The travel-quest target resolves to its location."""
        assert game_session.get_travel_quest_target() is None

        game_session.set_travel_quest_from_scenario("T2", "find the relic")

        assert game_session.get_travel_quest_target().name == "Thornwick"


class TestTravel:
    """Tests for travel_to and arrive_at_destination."""

    def test_travel_and_arrive(self, realm_session, recorder):
        """A journey deducts gold, then arrival moves the player."""
        realm_session.add_hook(recorder)
        route = _route_to(realm_session, "B")

        assert realm_session.travel_to(route) is True
        assert realm_session.travel_state.is_traveling
        assert realm_session.player_state.stats.gold == 20

        completed = realm_session.arrive_at_destination()

        assert completed == []
        assert realm_session.travel_state.current_location_id == "B"
        assert realm_session.travel_state.traveling is None
        assert "B" in realm_session.player_state.visited_locations
        assert realm_session.player_state.current_location_id == "B"
        assert recorder.names() == ["travel_started", "arrival"]

    def test_gold_floored_at_zero(self, realm_session):
        """Travel never drives gold negative."""
        realm_session.player_state = realm_session.player_state.model_copy(
            update={"stats": realm_session.player_state.stats.model_copy(update={"gold": 5})}
        )

        assert realm_session.travel_to(_route_to(realm_session, "B")) is True
        assert realm_session.player_state.stats.gold == 0

    def test_no_charge_when_disabled(self, realm_world):
        """Cost is not deducted when charging is disabled."""
        settings = Settings(_env_file=None, charge_travel_cost=False)
        session = GameSession.start(realm_world, "C1", 1, settings=settings)

        session.travel_to(_route_to(session, "B"))

        assert session.player_state.stats.gold == 50

    def test_locked_route_refused(self, game_session):
        """Locked routes cannot be travelled."""
        route = _route_to(game_session, "C2")

        assert game_session.travel_to(route) is False
        assert game_session.travel_state.traveling is None

    def test_second_journey_refused(self, realm_session):
        """Only one journey at a time."""
        realm_session.travel_to(_route_to(realm_session, "M"))

        assert realm_session.travel_to(_route_to(realm_session, "A")) is False
        assert realm_session.travel_state.traveling.to_id == "M"

    def test_route_from_elsewhere_refused(self, realm_session):
        """Routes must start at the current location."""
        route = _route_to(realm_session, "M").model_copy(update={"from_id": "A", "to_id": "B"})

        assert realm_session.travel_to(route) is False

    def test_arrive_while_idle(self, game_session, caplog):
        """Arriving without a journey is a no-op."""
        assert game_session.arrive_at_destination() == []
        assert game_session.travel_state.current_location_id == "C1"
        assert "not travelling" in caplog.text

    def test_arrival_updates_kingdom(self, game_session):
        """Arriving in another kingdom switches the current kingdom."""
        game_session.unlock_new_location("C2")

        game_session.travel_to(_route_to(game_session, "C2"))
        game_session.arrive_at_destination()

        assert game_session.travel_state.current_kingdom_id == 2
        assert game_session.get_current_kingdom().name == "Brenmoor"


class TestForcedTravelFlow:
    """End-to-end forced travel: effect, journey, arrival."""

    def test_require_travel_then_arrive(self, game_session, require_relic, recorder):
        """The travel quest completes on arrival and the pointer clears."""
        game_session.add_hook(recorder)

        result = game_session.process_effects([require_relic], 2)

        assert result.requires_travel_choice is True
        assert game_session.travel_state.travel_quest.target_location_id == "T2"
        assert "T2" in game_session.travel_state.unlocked_locations
        quest = game_session.quests[0]
        assert quest.type is QuestType.TRAVEL
        assert game_session.active_quest_id == quest.id

        options = game_session.get_available_routes()
        assert options[0].route.to_id == "T2"
        assert options[0].route.is_unlocked is True

        assert game_session.travel_to(options[0].route) is True
        completed = game_session.arrive_at_destination()

        assert [q.id for q in completed] == [quest.id]
        assert game_session.ledger.get(quest.id).status is QuestStatus.COMPLETED
        assert game_session.travel_state.travel_quest is None
        assert game_session.active_quest_id is None
        assert game_session.travel_state.current_kingdom_id == 2
        assert game_session.player_state.stats.reputation == 10
        assert game_session.player_state.stats.gold == 5
        assert [e.type for e in game_session.world_events] == [
            WorldEventType.LOCATION_UNLOCKED,
            WorldEventType.QUEST_COMPLETED,
            WorldEventType.ARRIVED,
        ]
        arrival = recorder.of("arrival")[0]
        assert arrival.completed_quests == [quest.id]

    def test_set_travel_quest_from_scenario(self, game_session):
        """Scenario travel quests are tracked and unlock the target."""
        quest = game_session.set_travel_quest_from_scenario("T2", "the king summons you", deadline=6)

        assert quest.title == "Journey to Thornwick"
        assert quest.deadline == 6
        assert game_session.active_quest_id == quest.id
        assert game_session.travel_state.travel_quest.quest_id == quest.id
        assert "T2" in game_session.travel_state.unlocked_locations

    def test_set_travel_quest_unknown_location(self, game_session):
        """Unknown targets create nothing."""
        assert game_session.set_travel_quest_from_scenario("nowhere", "lost") is None
        assert game_session.quests == ()

    def test_failing_travel_quest_clears_pointer(self, game_session, require_relic):
        """Resolving the travel quest by other means clears the pointer."""
        game_session.process_effects([require_relic], 2)
        quest_id = game_session.travel_state.travel_quest.quest_id

        game_session.fail_quest(quest_id)

        assert game_session.travel_state.travel_quest is None
        assert game_session.world_events[-1].type is WorldEventType.QUEST_FAILED


class TestQuestPassthroughs:
    """Tests for quest add / complete / fail and reward settlement."""

    def test_complete_applies_rewards(self, game_session):
        """Completing a quest grants its rewards."""
        game_session.add_quest(
            create_quest(
                id="q1",
                rewards=QuestRewards(gold=25, influence=2, items=("Sigil",), unlock_locations=("C2",)),
            )
        )

        game_session.complete_quest("q1")

        player = game_session.player_state
        assert player.stats.gold == 75
        assert player.stats.influence == 12
        assert player.find_item("Sigil") is not None
        assert "C2" in game_session.travel_state.unlocked_locations

    def test_rewards_disabled(self, two_kingdom_world):
        """No rewards are applied when disabled."""
        settings = Settings(_env_file=None, apply_quest_rewards=False)
        session = GameSession.start(two_kingdom_world, "C1", 1, settings=settings)
        session.add_quest(create_quest(id="q1", rewards=QuestRewards(gold=25)))

        session.complete_quest("q1")

        assert session.player_state.stats.gold == 50

    def test_fail_applies_consequences(self, game_session):
        """Failing a quest applies its consequences."""
        game_session.player_state = game_session.player_state.model_copy(
            update={"stats": game_session.player_state.stats.model_copy(update={"reputation": 20})}
        )
        game_session.add_quest(
            create_quest(
                id="q1",
                failure_consequences=FailureConsequences(reputation=-5, flags=("betrayed_guild",)),
            )
        )

        game_session.fail_quest("q1")

        assert game_session.player_state.stats.reputation == 15
        assert game_session.player_state.get_flag("betrayed_guild").value is True

    def test_rewards_granted_once(self, game_session):
        """A terminal quest cannot be completed again for a second reward."""
        game_session.add_quest(create_quest(id="q1", rewards=QuestRewards(gold=10)))

        game_session.complete_quest("q1")
        game_session.complete_quest("q1")

        assert game_session.player_state.stats.gold == 60

    def test_unknown_quest_noop(self, game_session):
        """Unknown quest ids change nothing."""
        game_session.complete_quest("missing")

        assert game_session.quests == ()

    def test_expire_overdue_quests(self, game_session):
        """Quests past their deadline fail."""
        game_session.add_quest(create_quest(id="late", deadline=2))
        game_session.add_quest(create_quest(id="open"))

        expired = game_session.expire_overdue_quests(scene_number=3)

        assert [q.id for q in expired] == ["late"]
        assert game_session.ledger.get("open").status is QuestStatus.ACTIVE


class TestProcessEffects:
    """Tests for effect batch processing."""

    def test_commits_all_state(self, game_session):
        """Player, travel and quests are committed from the batch."""
        result = game_session.process_effects(
            [
                StatEffect(attribute="gold", change=-10),
                {"kind": "quest", "action": "add", "questId": "q1", "title": "Relic"},
                TravelEffect(action="unlock_route", target_location_id="C2"),
            ],
            4,
        )

        assert game_session.scene_number == 4
        assert game_session.player_state.stats.gold == 40
        assert game_session.ledger.get("q1") is not None
        assert "C2" in game_session.travel_state.unlocked_locations
        assert len(result.applied) == 3
        assert game_session.world_events[0].type is WorldEventType.LOCATION_UNLOCKED
        assert game_session.world_events[0].scene_number == 4

    def test_move_runs_arrival_sweep(self, game_session):
        """An explicit move completes travel objectives at the destination."""
        game_session.add_quest(create_quest(id="q1", objectives=[create_travel_objective("C2")]))

        result = game_session.process_effects([TravelEffect(action="move", target_location_id="C2")], 5)

        assert result.moved is True
        assert game_session.travel_state.current_location_id == "C2"
        assert game_session.ledger.get("q1").status is QuestStatus.COMPLETED
        assert game_session.world_events[-1].type is WorldEventType.ARRIVED

    def test_quest_complete_effect_settles_rewards(self, game_session):
        """Quests completed by effects grant their rewards."""
        game_session.add_quest(create_quest(id="q1", rewards=QuestRewards(reputation=4)))

        game_session.process_effects([QuestEffect(action="complete", quest_id="q1")], 2)

        assert game_session.player_state.stats.reputation == 4

    def test_malformed_effects_do_not_abort(self, game_session, recorder):
        """Bad payloads are skipped and reported."""
        game_session.add_hook(recorder)

        result = game_session.process_effects([{"kind": "item"}, {"kind": "flag", "flagId": "ok"}], 1)

        assert result.skipped == 1
        assert game_session.player_state.get_flag("ok") is not None
        assert len(recorder.of("effect_skipped")) == 1
