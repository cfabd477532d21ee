"""Outbound reply texts."""

import html

from .schema import Learned, Rejected, RejectionReason, Reply, Statistics

HTML = "HTML"

HELP_TEXT = """
🤖 <b>SormGPT Help</b> 🤖

You can interact with me in these ways:

• Ask me any question
• Teach me new things with:
  <code>!teach question | answer</code>
• View stats with:
  <code>/stats</code>

I'll do my best to help you!
"""

UNKNOWN_ANSWER_TEXT = (
    "I don't know the answer to that. You can teach me using:\n\n"
    "<code>!teach question | answer</code>"
)

GENERIC_ERROR_TEXT = "❌ An error occurred while processing your request."
SAVE_FAILED_TEXT = "❌ Failed to save the knowledge. Please try again."
STATS_FAILED_TEXT = "❌ Could not retrieve statistics."


def help_reply() -> Reply:
    return Reply(HELP_TEXT, parse_mode=HTML)


def unknown_answer_reply() -> Reply:
    return Reply(UNKNOWN_ANSWER_TEXT, parse_mode=HTML)


def learned_reply(result: Learned) -> Reply:
    return Reply(f"✅ Learned: '{result.question}' → '{result.answer}'")


def rejected_reply(result: Rejected) -> Reply:
    if result.reason == RejectionReason.INVALID_FORMAT:
        return Reply(f"❌ {result.message}")
    return Reply(result.message)


def format_statistics(stats: Statistics) -> str:
    lines = [
        "",
        "📊 <b>Bot Statistics</b>",
        "",
        f"• Learned responses: {stats.entry_count}",
        f"• Total interactions: {stats.interaction_count}",
        "",
        "<b>Top Questions:</b>",
    ]
    for i, entry in enumerate(stats.top_questions, start=1):
        lines.append(f"{i}. {html.escape(entry.question)} (used {entry.usage_count} times)")
    return "\n".join(lines)


def stats_reply(stats: Statistics) -> Reply:
    return Reply(format_statistics(stats), parse_mode=HTML)
