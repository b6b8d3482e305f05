def format_info(mover, score, move, nodes, elapsed):
    nps = int(nodes / elapsed) if elapsed > 0 else 0
    move_str = f"{move[0]},{move[1]}" if move else "-"
    outcome = {1: "win", 0: "tie", -1: "loss"}.get(score, str(score))

    return f"info mover {mover.value} score {score} ({outcome}) nodes {nodes} nps {nps} time {int(elapsed * 1000)}ms move {move_str}"
