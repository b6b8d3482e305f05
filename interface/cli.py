import argparse

from tictactoe.config import CONFIG, DIFFICULTIES, GAME_MODES, GRID_SIZES, configure_logging
from tictactoe.game import Game, GameMode, GameOverError, IllegalMoveError

HELP = "Commands: '<row> <col>' to play, 'hint', 'new', 'score', 'quit'"


def play(game: Game, read=input, write=print):
    """Interactive loop; returns when the user quits or input runs out."""
    write(HELP)
    while True:
        write(str(game.board))
        write("----------------------------")
        if game.is_over:
            write(game.status)
            write("Type 'new' for another game or 'quit'.")
        elif game.mode is GameMode.PVM and game.current is Game.MACHINE:
            cell = game.machine_move()
            write(f"Machine plays: {cell[0]} {cell[1]}")
            continue
        else:
            write(game.status)

        try:
            command = read("> ").strip().lower()
        except EOFError:
            return

        if command in ("q", "quit", "exit"):
            return
        if command == "new":
            game.new_game()
            continue
        if command == "score":
            s = game.scoreboard
            write(f"Win: {s.wins} | Lose: {s.losses} | Ties: {s.ties}")
            continue
        if command == "hint":
            cell = game.hint()
            write(f"Hint: {cell[0]} {cell[1]}" if cell else "No moves available!")
            continue

        parts = command.replace(",", " ").split()
        try:
            row, col = (int(p) for p in parts)
        except ValueError:
            write(f"Unrecognized input. {HELP}")
            continue
        try:
            game.play(row, col)
        except (GameOverError, IllegalMoveError) as e:
            write(f"Illegal move: {e}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play tic-tac-toe in the terminal")
    parser.add_argument("--mode", choices=GAME_MODES, default=CONFIG.game.mode)
    parser.add_argument("--difficulty", choices=DIFFICULTIES, default=CONFIG.game.difficulty)
    parser.add_argument("--size", type=int, choices=GRID_SIZES, default=CONFIG.game.grid_size)
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    play(Game(mode=args.mode, difficulty=args.difficulty, grid_size=args.size))


if __name__ == "__main__":
    main()
