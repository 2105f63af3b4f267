"""
cli.py - Command-line interface for rotating Connect Four

This module provides the turn loop around the engine: it prompts players for
columns or rotations, renders the board, keeps a win tally across games, and
offers a position loader and a benchmark.
"""

import argparse
import random
import sys
from typing import List, Optional, Sequence, Tuple

from rotating_connect4.debug import debug, DebugLevel
from rotating_connect4.exceptions import Connect4Error
from rotating_connect4.game.board import Board
from rotating_connect4.game.rules import ConnectFourGame
from rotating_connect4.utils import (DEFAULT_HEIGHT, DEFAULT_ROTATIONS,
                                     DEFAULT_WIDTH, Cell, GameStatus, Rotation)

AI_NAME = "AI"

# Actions returned by parse_action
PLAY = "play"
ROTATE = "rotate"
QUIT = "quit"

Action = Tuple[str, object]

# Row 1 is drawn at the top, so the CLOCKWISE transform turns the picture left
ROTATION_HELP = ("cw: quarter turn, board turns left as drawn; "
                 "ccw: quarter turn, board turns right as drawn")


def parse_action(text: str) -> Optional[Action]:
    """
    Turn a line of player input into an action.

    ``4`` plays column 4, ``cw``/``ccw`` (or the long forms) rotate, ``q``
    quits. Returns None when the input means nothing.
    """
    text = text.strip().lower()
    if text in ("q", "quit"):
        return (QUIT, None)

    try:
        return (PLAY, int(text))
    except ValueError:
        pass

    try:
        return (ROTATE, Rotation.parse(text))
    except ValueError:
        return None


class Player:
    """A named participant with a token colour, a rotation budget and a win count."""

    def __init__(self, name: str, token: Cell, is_ai: bool = False):
        self.name = name
        self.token = token
        self.is_ai = is_ai
        self.wins = 0
        self.rotations_left = 0

    def __str__(self) -> str:
        return self.name


class SimpleCLI:
    """Simple command-line interface for playing rotating Connect Four."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.args = None
        self.rng = rng or random.Random()
        self.players: List[Player] = []

    def parse_args(self, argv: Optional[Sequence[str]] = None) -> None:
        """Parse command-line arguments and configure logging."""
        parser = argparse.ArgumentParser(description='Rotating Connect Four')
        parser.add_argument('--debug', action='store_true', help='Enable debug logging')
        parser.add_argument('--debug-level', default='warning',
                            choices=[level.name.lower() for level in DebugLevel],
                            help='Logging level')
        parser.add_argument('--log-file', default=None, help='Also write logs to this file')

        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        play_parser = subparsers.add_parser('play', help='Play a game interactively')
        play_parser.add_argument('--width', type=int, default=DEFAULT_WIDTH)
        play_parser.add_argument('--height', type=int, default=DEFAULT_HEIGHT)
        play_parser.add_argument('--rotations', type=int, default=DEFAULT_ROTATIONS,
                                 help='Rotations each player may use (0 disables rotation)')
        play_parser.add_argument('--ai', choices=['random', 'none'], default='none',
                                 help='Opponent for player two')
        play_parser.add_argument('--seed', type=int, default=None)

        position_parser = subparsers.add_parser('position', help='Score a board position')
        position_parser.add_argument('rows', help="Rows top to bottom separated by '/', "
                                                  "using '.', 'X' (red) and 'O' (yellow)")
        position_parser.add_argument('--rotate', choices=['cw', 'ccw'], default=None,
                                     help=f'Rotate the position once before scoring ({ROTATION_HELP})')

        benchmark_parser = subparsers.add_parser('benchmark', help='Benchmark random games')
        benchmark_parser.add_argument('--games', type=int, default=200)
        benchmark_parser.add_argument('--width', type=int, default=DEFAULT_WIDTH)
        benchmark_parser.add_argument('--height', type=int, default=DEFAULT_HEIGHT)
        benchmark_parser.add_argument('--seed', type=int, default=None)

        self.args = parser.parse_args(argv)

        level = DebugLevel.DEBUG if self.args.debug else DebugLevel[self.args.debug_level.upper()]
        debug.configure(level=level, log_file=self.args.log_file)

        if getattr(self.args, 'seed', None) is not None:
            self.rng.seed(self.args.seed)

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """Run the CLI based on the parsed arguments. Returns an exit code."""
        if not self.args:
            self.parse_args(argv)

        if self.args.command == 'play':
            self.play_session()
        elif self.args.command == 'position':
            return self.show_position()
        elif self.args.command == 'benchmark':
            return self.benchmark()
        else:
            print("Please specify a command. Use --help for options.")
            return 1
        return 0

    # --- Interactive play ---

    def setup_players(self) -> None:
        first = input("Name of player 1 (red): ").strip() or "Player 1"
        if self.args.ai == 'random':
            second = AI_NAME
        else:
            second = input("Name of player 2 (yellow): ").strip() or "Player 2"

        self.players = [
            Player(first, Cell.RED),
            Player(second, Cell.YELLOW, is_ai=self.args.ai == 'random'),
        ]

    def play_session(self) -> None:
        """Play games until the players decline a rematch."""
        self.setup_players()

        while True:
            self.play_game()
            print("Score: " + ", ".join(f"{p.name} {p.wins}" for p in self.players))

            answer = input("Play again? (y/n): ").strip().lower()
            if answer not in ("y", "yes"):
                break

    def play_game(self) -> Optional[GameStatus]:
        """
        Play one game. Returns the final status, or None if a player quit.
        """
        try:
            game = ConnectFourGame(self.args.width, self.args.height)
        except Connect4Error as e:
            print(f"Cannot start game: {e}")
            return None

        for player in self.players:
            player.rotations_left = max(self.args.rotations, 0)

        print("Starting a new game!")
        print(f"Enter a column (1-{game.width}) to drop a token, 'q' to quit.")
        if self.args.rotations > 0:
            print(f"Enter 'cw' or 'ccw' to rotate the board instead ({ROTATION_HELP}).")
        print(game.render())

        turn = 0
        while not game.is_game_over():
            player = self.players[turn % 2]

            action = self.get_ai_action(game) if player.is_ai else self.get_human_action(game, player)
            if action[0] == QUIT:
                print("Quitting game.")
                return None

            try:
                self.apply_action(game, player, action)
            except Connect4Error as e:
                print(f"Invalid move: {e}")
                continue

            print(game.render())
            turn += 1

        self.announce(game.status)
        return game.status

    def apply_action(self, game: ConnectFourGame, player: Player, action: Action) -> None:
        kind, value = action
        if kind == ROTATE:
            game.rotate(value)
            player.rotations_left -= 1
            screen = "left" if value == Rotation.CLOCKWISE else "right"
            print(f"{player.name} rotates the board {value.name.lower().replace('_', '-')}, "
                  f"turning it {screen} as drawn ({player.rotations_left} left)")
        else:
            game.play(value, player.token)

    def get_human_action(self, game: ConnectFourGame, player: Player) -> Action:
        """Prompt until the player enters a usable action."""
        while True:
            prompt = f"{player.name} ({player.token}), your move"
            if player.rotations_left > 0:
                prompt += f" [1-{game.width}, cw=turn left / ccw=turn right]: "
            else:
                prompt += f" [1-{game.width}]: "

            action = parse_action(input(prompt))
            if action is None:
                print("Invalid input. Enter a column number, a rotation or 'q'.")
                continue

            kind, value = action
            if kind == PLAY and game.column_invalid(value):
                print(f"Column must be between 1 and {game.width}.")
                continue
            if kind == ROTATE and player.rotations_left <= 0:
                print("You have no rotations left.")
                continue

            return action

    def get_ai_action(self, game: ConnectFourGame) -> Action:
        """Random opponent: drops a token in any column with room."""
        column = self.rng.choice(game.valid_columns())
        print(f"{AI_NAME} plays column {column}")
        return (PLAY, column)

    def announce(self, status: GameStatus) -> None:
        print("Game over!")
        winner = status.winner()
        if winner is None:
            print("It's a draw!")
            return

        for player in self.players:
            if player.token == winner:
                player.wins += 1
                print(f"{player.name} wins!")

    # --- Position analysis ---

    def show_position(self) -> int:
        try:
            board = Board.from_rows(self.args.rows.split('/'))
            game = ConnectFourGame.from_board(board)
            if self.args.rotate:
                game.rotate(Rotation.parse(self.args.rotate))
        except (Connect4Error, ValueError) as e:
            print(f"Error parsing position: {e}")
            return 1

        print(game.render())
        print(f"Status: {game.status.name}")
        print(f"Red tokens: {game.board.count(Cell.RED)}, "
              f"yellow tokens: {game.board.count(Cell.YELLOW)}")
        print(f"Valid columns: {game.valid_columns()}")
        return 0

    # --- Benchmark ---

    def benchmark(self) -> int:
        """Play random games mixing drops and rotations and report timings. Returns an exit code."""
        games = max(self.args.games, 1)
        print(f"Running benchmark with {games} games...")

        outcomes = {status: 0 for status in GameStatus}
        actions = 0

        debug.start_timer("benchmark")
        for _ in range(games):
            try:
                game = ConnectFourGame(self.args.width, self.args.height)
            except Connect4Error as e:
                debug.end_timer("benchmark", "cli")
                print(f"Cannot start game: {e}")
                return 1
            token = Cell.RED
            while not game.is_game_over():
                if self.rng.random() < 0.1:
                    game.rotate(self.rng.choice(list(Rotation)))
                else:
                    game.play(self.rng.choice(game.valid_columns()), token)
                token = token.other()
                actions += 1
            outcomes[game.status] += 1
        elapsed = debug.end_timer("benchmark", "cli") or 0.0

        print(f"Played {games} games with {actions} actions in {elapsed:.4f} seconds "
              f"({elapsed / games * 1000:.4f} ms per game, "
              f"{elapsed / max(actions, 1) * 1000:.4f} ms per action)")
        for status, count in outcomes.items():
            if status != GameStatus.IN_PROGRESS:
                print(f"  {status.name}: {count}")
        return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the CLI."""
    cli = SimpleCLI()
    return cli.run(argv)


if __name__ == "__main__":
    sys.exit(main())
