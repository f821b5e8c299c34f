"""
Main game runner for skirmish.

Plays a match between scripted bots from the command line, streams the
event log to stdout and writes a JSON game log.
"""

import json
import logging
from pathlib import Path
from datetime import datetime
from typing import Optional

from dotenv import load_dotenv

# Load SKIRMISH_* settings from .env
load_dotenv(Path(__file__).parent / ".env")

from skirmish import GameConfig, Scenario, CommandProcessor, GameEvent
from skirmish.config import DATA_PATH, parse_difficulties
from commanders import ScriptedCommander

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class SkirmishMatch:
    """Main match orchestrator."""

    def __init__(
        self,
        config: GameConfig,
        scenario: str = "default",
        data_path: Path | str = DATA_PATH,
        log_dir: str = "logs",
        echo: bool = True,
    ):
        self.config = config
        self.scenario_name = scenario
        self.data_path = Path(data_path)
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(exist_ok=True)
        self.echo = echo

        logger.info(f"Loading scenario: {scenario}")
        self.scenario = Scenario.load(scenario, self.data_path)

        logger.info("Initializing game state...")
        self.state = self.scenario.build_state(config)
        if self.echo:
            self.state.events.subscribe(self._print_event)

        logger.info("Initializing command processor...")
        self.processor = CommandProcessor(self.state)

        for faction in sorted(config.bot_difficulties):
            difficulty = config.bot_difficulties[faction]
            logger.info(f"Initializing bot for faction {faction} ({difficulty})...")
            self.processor.register_commander(
                faction,
                ScriptedCommander.create_default(
                    faction, difficulty, pacing=config.pacing, rng=self.state.rng,
                ),
            )

        self.start_time: Optional[datetime] = None

    def _print_event(self, event: GameEvent):
        who = f"P{event.faction}" if event.faction is not None else "--"
        print(f"[T{event.turn:>3} {who}] {event.message}", flush=True)

    def run(self) -> dict:
        """Run until the game ends."""
        if self.config.turn_limit is None:
            raise ValueError("Unattended matches need a turn limit")
        self.start_time = datetime.now()
        humans = [f for f in self.state.factions if f not in self.processor.commanders]
        if humans:
            logger.warning(f"Factions {humans} have no bot; their turns are passed")

        self.processor.start()
        while not self.state.is_over:
            # Pass for factions without a bot
            self.processor.end_turn(self.state.current_faction)

        results = self._compile_results()
        self._save_game_log(results)
        return results

    def _compile_results(self) -> dict:
        """Compile final game results."""
        state = self.state
        return {
            "scenario": self.scenario.name,
            "turns_played": state.turn.turn,
            "winner": state.winner.winning_faction if state.winner else None,
            "reason": state.winner.reason if state.winner else None,
            "scores": self.processor.turns.scores(),
            "surviving_units": {
                f: len(state.units.get_units_by_faction(f)) for f in state.factions
            },
            "economy": state.treasury.get_summary(),
            "map": state.board.get_stats(),
            "units": state.units.get_stats(),
            "duration": str(datetime.now() - self.start_time) if self.start_time else None,
        }

    def _save_game_log(self, results: dict):
        """Save game log to file."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = self.log_dir / f"game_{timestamp}.json"

        with open(log_path, "w") as f:
            json.dump({"events": self.state.events.to_list(), "result": results},
                      f, indent=2, default=str)

        logger.info(f"Game log saved to: {log_path}")


def main():
    """Run a skirmish match."""
    import argparse

    parser = argparse.ArgumentParser(description="Skirmish tactical combat simulation")
    parser.add_argument("--scenario", default="default", help="Scenario name or .yaml path")
    parser.add_argument("--players", type=int, default=None, help="Number of factions (2-4)")
    parser.add_argument("--turns", type=int, default=None, help="Turn limit (default: scenario defined)")
    parser.add_argument("--difficulty", default="", help="Bot difficulties, e.g. 2=hard,3=easy")
    parser.add_argument("--all-bots", action="store_true", help="Every faction is a bot")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--pacing", action="store_true", help="Pause between bot actions")
    parser.add_argument("--data", default=str(DATA_PATH), help="Data directory path")
    parser.add_argument("--logs", default="logs", help="Log directory path")

    args = parser.parse_args()

    scenario = Scenario.load(args.scenario, args.data)
    base = GameConfig.from_env(scenario.build_config())
    players = args.players or base.players

    bots = {f: d for f, d in base.bot_difficulties.items() if f <= players}
    bots.update(parse_difficulties(args.difficulty))
    if args.all_bots:
        for faction in range(1, players + 1):
            bots.setdefault(faction, "medium")

    config = scenario.build_config(
        players=players,
        turn_limit=args.turns or base.turn_limit,
        starting_money=base.starting_money,
        income_per_turn=base.income_per_turn,
        actions_per_turn=base.actions_per_turn,
        bot_difficulties=bots,
        seed=args.seed if args.seed is not None else base.seed,
        pacing=args.pacing or base.pacing,
    )

    match = SkirmishMatch(config, scenario=args.scenario, data_path=args.data, log_dir=args.logs)
    results = match.run()

    print("\n" + "="*60)
    print("FINAL RESULTS")
    print("="*60)
    print(f"Turns played: {results['turns_played']}")
    print(f"Winner: faction {results['winner']} ({results['reason']})")
    print(f"Scores: {results['scores']}")
    print(f"Surviving units: {results['surviving_units']}")
    print(f"Duration: {results['duration']}")


if __name__ == "__main__":
    main()
