"""
CaseKeeper - Source Package
===========================

Moderation case tracker for a single Discord server.

Package Structure:
- bot.py: Discord client wiring the services to the guild
- commands/: Slash command cogs (/ban, /mute, /warn, /role, /history, ...)
- core/: Configuration, tree logger and the case store
- services/: Platform adapter, moderation pipeline, mod log and expiry timers
- utils/: Duration parsing and error handling
"""
