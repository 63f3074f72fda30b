import string
from typing import List, Optional

import discord

from numbers_game import Puzzle, RunStatus, Solution, SolutionAggregator, Step, Value

MAX_MESSAGE_LENGTH = 2000


def label_name(label: int) -> str:
    """Letters for labels: A..Z, then AA, AB, ..."""
    letters = string.ascii_uppercase
    name = ""
    label += 1
    while label > 0:
        label, remainder = divmod(label - 1, len(letters))
        name = letters[remainder] + name
    return name


def format_value(value: Value, show_labels: bool = False) -> str:
    if show_labels:
        return f"{value.magnitude}[{label_name(value.label)}]"
    return str(value.magnitude)


def format_step(step: Step, show_labels: bool = False) -> str:
    return (f"{format_value(step.operand1, show_labels)} {step.operator.symbol} "
            f"{format_value(step.operand2, show_labels)} = {format_value(step.result, show_labels)}")


def format_solution(solution: Solution, show_labels: bool = False) -> str:
    steps = "; ".join(format_step(step, show_labels) for step in solution.steps)
    away = "exact" if solution.exact else f"{solution.distance} away"
    return f"{steps} ({away})"


def render_results(puzzle: Puzzle, aggregator: SolutionAggregator,
                   limit: int = 10, show_labels: bool = False) -> str:
    """
    Build the results message for a puzzle from what the aggregator holds.
    """
    numbers = " ".join(f"**{n}**" for n in puzzle.sources)
    lines = [f"🎯 Target: **{puzzle.target}** | Numbers: {numbers}"]

    if aggregator.status is RunStatus.RUNNING:
        lines.append("⏳ Searching...")
    elif aggregator.status is RunStatus.CANCELLED:
        lines.append("🛑 Search cancelled.")
    else:
        lines.append("✅ Search complete.")

    solutions = aggregator.solutions
    if not solutions:
        lines.append("No solutions yet." if not aggregator.done else "No solutions found.")
        return "\n".join(lines)

    best = solutions[0]
    if best.exact:
        lines.append(f"**Solved!** {len(solutions)} way(s) kept:")
    else:
        lines.append(f"Closest: **{best.result_value}** ({best.distance} away). "
                     f"{len(solutions)} way(s) kept:")

    for i, solution in enumerate(solutions[:limit], 1):
        lines.append(f"{i}. {format_solution(solution, show_labels)}")
    if len(solutions) > limit:
        lines.append(f"...and {len(solutions) - limit} more")
    return "\n".join(lines)


def split_message(message: str, max_length: int = MAX_MESSAGE_LENGTH) -> List[str]:
    """
    Split a message on line boundaries into chunks Discord will accept
    """
    if len(message) <= max_length:
        return [message]

    chunks = []
    current_chunk = ""

    for line in message.split('\n'):
        # a single overlong line gets hard-wrapped
        if len(line) >= max_length:
            if current_chunk:
                chunks.append(current_chunk)
                current_chunk = ""
            while len(line) >= max_length:
                chunks.append(line[:max_length])
                line = line[max_length:]
            if not line:
                continue
        if len(current_chunk) + len(line) + 1 <= max_length:
            current_chunk += line + '\n'
        else:
            if current_chunk:
                chunks.append(current_chunk)
            current_chunk = line + '\n'

    if current_chunk:
        chunks.append(current_chunk)
    return chunks


async def send_chunked_message(channel: discord.abc.Messageable, message: str,
                               reference: Optional[discord.Message] = None):
    """
    Sends a message in chunks if it exceeds Discord's character limit.
    Returns the first message sent.
    """
    chunks = split_message(message)

    # Send first chunk with reference
    first = await channel.send(chunks[0], reference=reference)

    # Send remaining chunks
    for chunk in chunks[1:]:
        await channel.send(chunk)
    return first
