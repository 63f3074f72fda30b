import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Dict, Optional

import discord
from discord.ext import commands

from config.config import Config
from numbers_game import Puzzle, SearchRun, SolutionAggregator
from utils.helpers import render_results, send_chunked_message, split_message

logger = logging.getLogger(__name__)

RULES_TEXT = (
    "**Numbers Game rules**\n"
    "- Six numbers: small numbers 1-10 (each at most twice) and large numbers "
    "25, 50, 75, 100 (each at most once).\n"
    "- A target between 100 and 999.\n"
    "- Combine numbers with +, -, × and ÷. Each number can be used once, "
    "you don't have to use them all.\n"
    "- Results must stay positive whole numbers; division must be exact.\n\n"
    "**Commands**\n"
    "`!solve 1 3 7 6 8 3 250` - solve a puzzle (numbers, then target)\n"
    "`!numbers [large]` - deal a random puzzle with 0-4 large numbers and solve it\n"
    "`!best` - show every solution kept for this channel\n"
    "`!cancel` - stop the search in this channel"
)


@dataclass
class ChannelSearch:
    """The search currently attached to a channel."""
    puzzle: Puzzle
    run: SearchRun
    aggregator: SolutionAggregator
    message: Optional[discord.Message] = None
    task: Optional[asyncio.Task] = None
    last_update: float = 0.0


class NumbersBot(commands.Bot):
    def __init__(self, config: Config):
        # Set up intents explicitly
        intents = discord.Intents.default()
        intents.message_content = True  # Needed to read command arguments
        intents.guilds = True
        intents.guild_messages = True

        super().__init__(command_prefix="!", intents=intents)
        logger.info("Initializing NumbersBot...")
        self.config = config
        self.settings = config.settings
        self.owner_id = int(config.owner_id)

        # Message deduplication buffer
        self.processed_messages = deque(maxlen=100)

        # One search per channel
        self.searches: Dict[int, ChannelSearch] = {}

        # Command handlers dictionary
        self.command_handlers = {
            'solve': self._handle_solve,
            'numbers': self._handle_numbers,
            'cancel': self._handle_cancel,
            'best': self._handle_best,
            'rules': self._handle_rules,
            'shutdown': self._handle_shutdown,
        }

    async def setup_hook(self):
        """This is called when the bot is ready to start"""
        self.add_commands()

    async def on_ready(self):
        logger.info("Logged in as %s (ID: %s)", self.user, self.user.id)

        await self.change_presence(
            activity=discord.Activity(
                type=discord.ActivityType.watching,
                name="for !solve | !rules"
            )
        )

    def add_commands(self):
        """Register commands using the command handlers dictionary"""
        for cmd_name, handler in self.command_handlers.items():
            # Create a closure that properly captures the handler
            def make_callback(h):
                async def callback(ctx, *, arg=None):
                    if arg is None:
                        await h(ctx)
                    else:
                        await h(ctx, arg)
                return callback

            cmd = commands.Command(make_callback(handler), name=cmd_name)
            self.add_command(cmd)

        logger.debug("Registered commands: %s", ", ".join(c.name for c in self.commands))

    async def _handle_solve(self, ctx, args=None):
        """Handle the solve command: !solve <numbers...> <target>"""
        if args is None:
            await ctx.send("Usage: `!solve 1 3 7 6 8 3 250` (the numbers, then the target)")
            return

        try:
            puzzle = Puzzle.parse(args).validate(strict=self.settings.strict_rules)
        except ValueError as e:
            await ctx.send(f"❌ {e}")
            return

        await self._start_search(ctx, puzzle)

    async def _handle_numbers(self, ctx, arg=None):
        """Handle the numbers command: deal a random puzzle and solve it"""
        if arg is not None and not arg.strip().isdigit():
            await ctx.send("Usage: `!numbers [0-4]` (how many large numbers)")
            return

        try:
            puzzle = Puzzle.random(int(arg) if arg is not None else None)
        except ValueError as e:
            await ctx.send(f"❌ {e}")
            return

        await self._start_search(ctx, puzzle)

    async def _handle_cancel(self, ctx):
        """Handle the cancel command"""
        search = self.searches.get(ctx.channel.id)
        if search is None or not search.run.running:
            await ctx.send("No search is running in this channel.")
            return

        await self._stop_search(ctx.channel.id, forget=False)
        await ctx.send("🛑 Search cancelled.")

    async def _handle_best(self, ctx):
        """Handle the best command - shows every retained solution"""
        search = self.searches.get(ctx.channel.id)
        if search is None:
            await ctx.send("No puzzle has been solved in this channel yet. Try `!solve`.")
            return

        content = render_results(search.puzzle, search.aggregator,
                                 limit=self.settings.max_solutions,
                                 show_labels=self.settings.show_labels)
        await send_chunked_message(ctx.channel, content, reference=ctx.message)

    async def _handle_rules(self, ctx):
        await ctx.send(RULES_TEXT)

    async def _handle_shutdown(self, ctx):
        """Handle the shutdown command"""
        if ctx.author.id != self.owner_id:
            await ctx.send("Only the bot owner can use this command.")
            return

        await ctx.send("Shutting down...")
        await self.close()

    async def _start_search(self, ctx, puzzle: Puzzle):
        channel_id = ctx.channel.id
        # Never let two runs feed the same channel
        await self._stop_search(channel_id)

        search = ChannelSearch(
            puzzle=puzzle,
            run=SearchRun(puzzle.sources, puzzle.target,
                          report_threshold=self.settings.report_threshold),
            aggregator=SolutionAggregator(max_solutions=self.settings.max_solutions,
                                          prune_dominated=self.settings.prune_dominated),
        )
        self.searches[channel_id] = search
        search.message = await ctx.send(self._render(search))
        search.last_update = time.monotonic()
        search.run.start()
        search.task = asyncio.create_task(self._run_search(search))

    async def _stop_search(self, channel_id: int, forget: bool = True):
        search = self.searches.get(channel_id)
        if search is None:
            return
        if forget:
            del self.searches[channel_id]

        search.run.cancel()
        if search.task is not None:
            await search.task

    async def _run_search(self, search: ChannelSearch):
        try:
            status = await search.run.stream_into(search.aggregator, lambda _: self._refresh(search))
            logger.info("Search for %s %s, best: %s", search.puzzle, status.value, search.aggregator.best)
        except Exception as e:
            logger.exception("Search for %s failed", search.puzzle)
            if search.message is not None:
                await search.message.channel.send(f"Error while solving: {e}")

    async def _refresh(self, search: ChannelSearch):
        """Edit the results message, at most once per update interval until the run ends."""
        now = time.monotonic()
        if not search.aggregator.done and now - search.last_update < self.settings.update_interval:
            return
        search.last_update = now

        if search.message is None:
            return
        try:
            await search.message.edit(content=self._render(search))
        except discord.HTTPException as e:
            logger.warning("Could not update results message: %s", e)

    def _render(self, search: ChannelSearch) -> str:
        content = render_results(search.puzzle, search.aggregator,
                                 limit=self.settings.display_limit,
                                 show_labels=self.settings.show_labels)
        return split_message(content)[0]

    async def close(self):
        for channel_id in list(self.searches):
            await self._stop_search(channel_id)
        await super().close()

    async def on_message(self, message: discord.Message):
        """Called when a message is received"""
        # Ignore messages from the bot itself
        if message.author == self.user:
            return

        # Deduplication check - must be BEFORE process_commands to prevent double command execution
        if message.id in self.processed_messages:
            return
        self.processed_messages.append(message.id)

        await self.process_commands(message)
