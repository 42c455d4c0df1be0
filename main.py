#!/usr/bin/env python3
"""
SentiChat - Chat companion with sentiment analysis.

Terminal entry point for the conversation session.
"""

import asyncio
import argparse
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

QUIT_COMMANDS = ("quit", "exit", "q")
NEW_CHAT_COMMAND = "/new"


def format_message(message) -> str:
    """Render a transcript message as a terminal line."""
    from sentichat.models import Sender, Sentiment

    if message.sender is Sender.USER:
        label = ""
        if message.sentiment not in (None, Sentiment.UNKNOWN):
            label = f"  [{message.sentiment.value}]"
        return f"You: {message.text}{label}"
    return f"NMS: {message.text}"


async def run_interactive(session) -> None:
    """Read user turns from stdin until the user quits."""
    print("\n" + "=" * 50)
    print("NMS - Your AI companion with sentiment analysis")
    print("=" * 50)
    print(f"Type '{NEW_CHAT_COMMAND}' for a new chat, 'quit' to stop.")
    print("=" * 50 + "\n")

    for message in session.transcript:
        print(format_message(message))

    while True:
        try:
            user_input = input("\nYou: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\n\nGoodbye!")
            break

        if not user_input:
            continue
        if user_input.lower() in QUIT_COMMANDS:
            print("\nGoodbye!")
            break
        if user_input == NEW_CHAT_COMMAND:
            session.reset()
            print(format_message(session.transcript[-1]))
            continue

        reply = await session.submit(user_input)
        transcript = session.transcript
        sentiment = transcript[-2].sentiment if len(transcript) > 1 else None
        if sentiment is not None:
            print(f"  [sentiment: {sentiment.value}]")
        if reply is not None:
            print(format_message(reply))


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="SentiChat - Chat companion with sentiment analysis"
    )
    parser.add_argument(
        "--text",
        type=str,
        default=None,
        help="Process a single text input and exit"
    )
    parser.add_argument(
        "--no-store",
        action="store_true",
        help="Do not load or save the chat history"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Import here to allow --help without loading all dependencies
    from sentichat.llm import GroqClient
    from sentichat.memory import StateStore
    from sentichat.session import ConversationSession

    store = None if args.no_store else StateStore()
    session = ConversationSession(GroqClient(), store=store)

    if args.text:
        async def process_single():
            reply = await session.submit(args.text)
            if reply is None:
                print("Nothing to send.")
                return
            user_message = session.transcript[-2]
            print(f"\nResponse: {reply.text if reply else ''}")
            print(f"Sentiment: {user_message.sentiment.value if user_message.sentiment else 'unknown'}")

        asyncio.run(process_single())
    else:
        asyncio.run(run_interactive(session))


if __name__ == "__main__":
    main()
