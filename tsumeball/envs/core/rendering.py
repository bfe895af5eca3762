from __future__ import annotations

import numpy as np

from tsumeball.envs.core.defense import screened_defender_ids
from tsumeball.envs.core.geometry import is_in_paint


def board_ascii(state) -> str:
    """Text board for a possession snapshot (O=offense, D=defense, *=ball)."""
    court = state.court
    grid = [[" · " for _ in range(court.grid_size)] for _ in range(court.grid_size)]

    for y in range(court.grid_size):
        for x in range(court.grid_size):
            if y in court.reserved_rows:
                grid[y][x] = "   "
            elif (x, y) == court.basket:
                grid[y][x] = " B "
            elif (x, y) in court.arc_cells:
                grid[y][x] = " : "

    for unit in state.units:
        x, y = unit.position
        if unit.is_offense:
            symbol = f"*{unit.id[1]}*" if unit.has_ball else f"O{unit.id[1]}"
        else:
            symbol = f"D{unit.id[1]}"
        grid[y][x] = f"{symbol:^3}"

    lines = [f"Turn {state.turn + 1}/{court.max_turns}  Phase: {state.phase.value}  Score: {state.score}  Streak: {state.streak}"]
    lines.append("   " + "".join(f"{x:^3}" for x in range(court.grid_size)))
    for y, row in enumerate(grid):
        lines.append(f"{y:>2} " + "".join(row))
    if state.message:
        lines.append(state.message)
    return "\n".join(lines)


def render_ascii(env):
    """Simple ASCII rendering for terminal play."""
    text = board_ascii(env.state)
    print(text)
    print("-" * 40)
    return text


def render_visual(env):
    """Visual rendering using matplotlib."""
    import io

    import matplotlib.pyplot as plt
    from matplotlib.patches import Circle, Rectangle
    from PIL import Image

    state = env.state
    court = state.court
    screened = screened_defender_ids(state.units)

    fig, ax = plt.subplots(figsize=(6, 6))
    ax.set_aspect("equal")

    for y in range(court.grid_size):
        if y in court.reserved_rows:
            continue
        for x in range(court.grid_size):
            if (x, y) in court.arc_cells:
                color = "#f2e6c9"
            elif is_in_paint((x, y), court):
                color = "#e8a87c"
            else:
                color = "#d9b382"
            ax.add_patch(Rectangle((x, y), 1, 1, facecolor=color, edgecolor="#7a5c3a", linewidth=0.8))

    bx, by = court.basket
    ax.add_patch(Circle((bx + 0.5, by + 0.5), 0.3, fill=False, edgecolor="orangered", linewidth=3))

    for unit in state.units:
        x, y = unit.position
        face = "royalblue" if unit.is_offense else "firebrick"
        edge = "gold" if unit.has_ball else ("black" if unit.id not in screened else "white")
        ax.add_patch(Circle((x + 0.5, y + 0.5), 0.38, facecolor=face, edgecolor=edge, linewidth=3, zorder=10))
        ax.text(
            x + 0.5,
            y + 0.5,
            unit.name,
            ha="center",
            va="center",
            fontsize=9,
            fontweight="bold",
            color="white",
            zorder=11,
        )

    ax.set_xlim(0, court.grid_size)
    # Row 1 (the basket row) at the top; reserved row 0 is not drawn.
    top = 1 if 0 in court.reserved_rows else 0
    ax.set_ylim(court.grid_size, top)
    ax.set_title(f"{state.phase.value} | turn {state.turn + 1}/{court.max_turns} | score {state.score}")
    ax.axis("off")

    buf = io.BytesIO()
    fig.savefig(buf, format="png", bbox_inches="tight", pad_inches=0.1)
    plt.close(fig)
    buf.seek(0)

    img = Image.open(buf)
    rgb_array = np.array(img.convert("RGB"))
    buf.close()

    return rgb_array
